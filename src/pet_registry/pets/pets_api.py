"""Pet routes (CRUD, microchip attachment and the atomic-insert demo)."""

from __future__ import annotations

from dataclasses import replace

from fastapi import APIRouter, Depends, Request, Response, status

from ..api_errors import unwrap_or_raise
from ..microchips.microchips_schemas import MicrochipPayload
from .pets_schemas import (
    MicrochipReassignRequest,
    PetCreateRequest,
    PetResponse,
    PetUpdateRequest,
)
from .pets_service import PetService

router = APIRouter(prefix="/api/pets", tags=["pets"])


def get_pet_service(request: Request) -> PetService:
    try:
        return request.app.state.pet_service  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("PetService is not configured") from exc


@router.get("/")
def list_pets(
    q: str | None = None,
    service: PetService = Depends(get_pet_service),
) -> list[PetResponse]:
    result = service.search_pets(q) if q is not None else service.list_pets()
    return [PetResponse.from_domain(pet) for pet in unwrap_or_raise(result)]


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_pet(
    payload: PetCreateRequest,
    service: PetService = Depends(get_pet_service),
) -> PetResponse:
    pet = unwrap_or_raise(service.create_pet(payload.to_domain()))
    return PetResponse.from_domain(pet)


@router.post("/unvalidated", status_code=status.HTTP_201_CREATED)
def create_pet_unvalidated(
    payload: PetCreateRequest,
    service: PetService = Depends(get_pet_service),
) -> PetResponse:
    """Insert chip and pet in a single transaction without field checks."""
    pet = unwrap_or_raise(service.create_pet_unvalidated(payload.to_domain()))
    return PetResponse.from_domain(pet)


@router.get("/{pet_id}")
def fetch_pet(pet_id: int, service: PetService = Depends(get_pet_service)) -> PetResponse:
    return PetResponse.from_domain(unwrap_or_raise(service.get_pet(pet_id)))


@router.put("/{pet_id}")
def update_pet(
    pet_id: int,
    payload: PetUpdateRequest,
    service: PetService = Depends(get_pet_service),
) -> PetResponse:
    current = unwrap_or_raise(service.get_pet(pet_id))
    changed = replace(current, **payload.model_dump())
    return PetResponse.from_domain(unwrap_or_raise(service.update_pet(changed)))


@router.delete("/{pet_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_pet(pet_id: int, service: PetService = Depends(get_pet_service)) -> Response:
    unwrap_or_raise(service.delete_pet(pet_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{pet_id}/microchip")
def update_pet_microchip(
    pet_id: int,
    payload: MicrochipPayload,
    service: PetService = Depends(get_pet_service),
) -> PetResponse:
    pet = unwrap_or_raise(service.update_pet_microchip(pet_id, payload.to_domain()))
    return PetResponse.from_domain(pet)


@router.post("/{pet_id}/microchip")
def reassign_microchip(
    pet_id: int,
    payload: MicrochipReassignRequest,
    service: PetService = Depends(get_pet_service),
) -> PetResponse:
    pet = unwrap_or_raise(service.reassign_microchip(pet_id, payload.microchip_id))
    return PetResponse.from_domain(pet)


@router.delete("/{pet_id}/microchip/{microchip_id}")
def detach_and_delete_microchip(
    pet_id: int,
    microchip_id: int,
    service: PetService = Depends(get_pet_service),
) -> PetResponse:
    pet = unwrap_or_raise(service.detach_and_delete_microchip(pet_id, microchip_id))
    return PetResponse.from_domain(pet)
