"""Dependency wiring helpers."""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import FastAPI

from .api_errors import ApiError, api_error_handler
from .config import AppConfig
from .db.transactions import TransactionManager
from .microchips.microchips_api import router as microchips_router
from .microchips.microchips_repository import MicrochipRepository
from .microchips.microchips_service import MicrochipService
from .pets.pets_api import router as pets_router
from .pets.pets_repository import PetRepository
from .pets.pets_service import PetService


@dataclass(frozen=True, slots=True)
class Services:
    microchips: MicrochipService
    pets: PetService


def build_services(config: AppConfig) -> Services:
    """Assemble gateways, the transaction manager and services."""
    microchips = MicrochipService(repo=MicrochipRepository(config.session_factory))
    pets = PetService(
        repo=PetRepository(config.session_factory),
        microchips=microchips,
        transactions=TransactionManager(config.session_factory),
    )
    return Services(microchips=microchips, pets=pets)


def include_routers(app: FastAPI, config: AppConfig) -> None:
    """Mount module routers and attach services."""
    services = build_services(config)
    app.state.microchip_service = services.microchips
    app.state.pet_service = services.pets

    app.add_exception_handler(ApiError, api_error_handler)
    app.include_router(pets_router)
    app.include_router(microchips_router)
