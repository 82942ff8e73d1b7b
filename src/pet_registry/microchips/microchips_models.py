"""Microchip domain record."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(slots=True)
class Microchip:
    """Implanted identification chip. ``id`` is ``None`` until persisted."""

    code: str
    implanted_on: date | None = None
    clinic: str | None = None
    notes: str | None = None
    id: int | None = None
    deleted: bool = False

    @property
    def is_persisted(self) -> bool:
        return self.id is not None and self.id > 0
