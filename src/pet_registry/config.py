"""Application configuration builder."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .db.db_init import init_db


class RegistrySettings(BaseSettings):
    """Environment driven settings (``PET_REGISTRY_*``)."""

    model_config = SettingsConfigDict(env_prefix="PET_REGISTRY_", env_file=".env", extra="ignore")

    database_url: str = Field(
        default="sqlite:///pet_registry.db",
        description="SQLAlchemy URL of the pets/microchips store",
    )
    echo_sql: bool = Field(default=False, description="Log emitted SQL statements")
    log_level: str = Field(default="INFO")


@dataclass(slots=True)
class AppConfig:
    database_url: str
    engine: Engine
    session_factory: sessionmaker[Session]
    log_level: str = "INFO"


def build_config(settings: RegistrySettings) -> AppConfig:
    """Create the engine and session factory, then bootstrap the schema."""
    engine = create_engine(settings.database_url, echo=settings.echo_sql, future=True)
    session_factory: sessionmaker[Session] = sessionmaker(bind=engine, expire_on_commit=False)

    init_db(engine)

    return AppConfig(
        database_url=settings.database_url,
        engine=engine,
        session_factory=session_factory,
        log_level=settings.log_level,
    )


def load_config() -> AppConfig:
    """Load configuration from environment (SQLite by default)."""
    return build_config(RegistrySettings())
