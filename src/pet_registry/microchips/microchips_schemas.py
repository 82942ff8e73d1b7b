"""Pydantic schemas for the microchip API."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel

from .microchips_models import Microchip


class MicrochipPayload(BaseModel):
    code: str
    implanted_on: date | None = None
    clinic: str | None = None
    notes: str | None = None

    def to_domain(self, microchip_id: int | None = None) -> Microchip:
        return Microchip(
            id=microchip_id,
            code=self.code,
            implanted_on=self.implanted_on,
            clinic=self.clinic,
            notes=self.notes,
        )


class MicrochipResponse(BaseModel):
    id: int
    code: str
    implanted_on: date | None
    clinic: str | None
    notes: str | None

    @classmethod
    def from_domain(cls, chip: Microchip) -> "MicrochipResponse":
        return cls(
            id=chip.id,
            code=chip.code,
            implanted_on=chip.implanted_on,
            clinic=chip.clinic,
            notes=chip.notes,
        )
