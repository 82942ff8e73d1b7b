"""Pydantic schemas for the pet API."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel

from ..microchips.microchips_schemas import MicrochipPayload, MicrochipResponse
from .pets_models import Pet


class AttachedMicrochipPayload(MicrochipPayload):
    """Chip sent along with a new pet; an `id` re-attaches an existing chip."""

    id: int | None = None


class PetCreateRequest(BaseModel):
    name: str
    species: str
    owner: str
    breed: str | None = None
    birth_date: date | None = None
    microchip: AttachedMicrochipPayload | None = None

    def to_domain(self) -> Pet:
        chip = None
        if self.microchip is not None:
            chip = self.microchip.to_domain(self.microchip.id)
        return Pet(
            name=self.name,
            species=self.species,
            owner=self.owner,
            breed=self.breed,
            birth_date=self.birth_date,
            microchip=chip,
        )


class PetUpdateRequest(BaseModel):
    name: str
    species: str
    owner: str
    breed: str | None = None
    birth_date: date | None = None


class MicrochipReassignRequest(BaseModel):
    microchip_id: int


class PetResponse(BaseModel):
    id: int
    name: str
    species: str
    owner: str
    breed: str | None
    birth_date: date | None
    microchip_id: int | None
    microchip: MicrochipResponse | None

    @classmethod
    def from_domain(cls, pet: Pet) -> "PetResponse":
        return cls(
            id=pet.id,
            name=pet.name,
            species=pet.species,
            owner=pet.owner,
            breed=pet.breed,
            birth_date=pet.birth_date,
            microchip_id=pet.microchip_id,
            microchip=MicrochipResponse.from_domain(pet.microchip) if pet.microchip else None,
        )
