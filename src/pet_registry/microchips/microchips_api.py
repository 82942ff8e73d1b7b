"""Microchip routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response, status

from ..api_errors import from_app_error, unwrap_or_raise
from ..exceptions import AppError
from ..pets.pets_api import get_pet_service
from ..pets.pets_service import PetService
from .microchips_schemas import MicrochipPayload, MicrochipResponse
from .microchips_service import MicrochipService

router = APIRouter(prefix="/api/microchips", tags=["microchips"])


def get_microchip_service(request: Request) -> MicrochipService:
    try:
        return request.app.state.microchip_service  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("MicrochipService is not configured") from exc


@router.get("/")
def list_microchips(
    service: MicrochipService = Depends(get_microchip_service),
) -> list[MicrochipResponse]:
    return [MicrochipResponse.from_domain(chip) for chip in service.list_active()]


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_microchip(
    payload: MicrochipPayload,
    service: MicrochipService = Depends(get_microchip_service),
) -> MicrochipResponse:
    try:
        chip = service.create(payload.to_domain())
    except AppError as exc:
        raise from_app_error(exc) from exc
    return MicrochipResponse.from_domain(chip)


@router.get("/{microchip_id}")
def fetch_microchip(
    microchip_id: int,
    service: MicrochipService = Depends(get_microchip_service),
) -> MicrochipResponse:
    try:
        chip = service.get(microchip_id)
    except AppError as exc:
        raise from_app_error(exc) from exc
    return MicrochipResponse.from_domain(chip)


@router.put("/{microchip_id}")
def update_microchip(
    microchip_id: int,
    payload: MicrochipPayload,
    service: MicrochipService = Depends(get_microchip_service),
) -> MicrochipResponse:
    try:
        chip = service.update(payload.to_domain(microchip_id))
    except AppError as exc:
        raise from_app_error(exc) from exc
    return MicrochipResponse.from_domain(chip)


@router.delete("/{microchip_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_microchip(
    microchip_id: int,
    force: bool = False,
    pets: PetService = Depends(get_pet_service),
) -> Response:
    """Soft-delete a chip without checking whether a pet still uses it."""
    unwrap_or_raise(pets.delete_microchip_unchecked(microchip_id, force=force))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
