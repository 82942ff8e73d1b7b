"""Pet domain record."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..microchips.microchips_models import Microchip


@dataclass(slots=True)
class Pet:
    name: str
    species: str
    owner: str
    breed: str | None = None
    birth_date: date | None = None
    microchip: Microchip | None = None
    id: int | None = None
    deleted: bool = False

    @property
    def microchip_id(self) -> int | None:
        if self.microchip is None:
            return None
        return self.microchip.id
