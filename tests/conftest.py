from __future__ import annotations

from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from pet_registry.config import AppConfig
from pet_registry.db.db_init import init_db
from pet_registry.db.transactions import TransactionManager
from pet_registry.dependencies import build_services
from pet_registry.microchips.microchips_repository import MicrochipRepository
from pet_registry.microchips.microchips_service import MicrochipService
from pet_registry.pets.pets_repository import PetRepository
from pet_registry.pets.pets_service import PetService


@pytest.fixture()
def engine(tmp_path: Path) -> Engine:
    engine = create_engine(f"sqlite:///{tmp_path / 'registry.db'}", future=True)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, expire_on_commit=False)


@pytest.fixture()
def app_config(engine: Engine, session_factory: sessionmaker[Session]) -> AppConfig:
    return AppConfig(
        database_url=str(engine.url),
        engine=engine,
        session_factory=session_factory,
    )


@pytest.fixture()
def microchip_repo(session_factory: sessionmaker[Session]) -> MicrochipRepository:
    return MicrochipRepository(session_factory)


@pytest.fixture()
def pet_repo(session_factory: sessionmaker[Session]) -> PetRepository:
    return PetRepository(session_factory)


@pytest.fixture()
def transactions(session_factory: sessionmaker[Session]) -> TransactionManager:
    return TransactionManager(session_factory)


@pytest.fixture()
def microchip_service(app_config: AppConfig) -> MicrochipService:
    return build_services(app_config).microchips


@pytest.fixture()
def pet_service(app_config: AppConfig) -> PetService:
    return build_services(app_config).pets
