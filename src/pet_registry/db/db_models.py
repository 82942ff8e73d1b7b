"""SQLAlchemy ORM models."""

from __future__ import annotations

from datetime import date
from typing import TypeVar

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    ForeignKey,
    false,
    Index,
    Integer,
    String,
    text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, Query, Session, mapped_column, relationship

from ..exceptions import CODE_UNIQUE_INDEX


class Base(DeclarativeBase):
    """Base declarative class."""


class MicrochipModel(Base):
    __tablename__ = "microchips"
    __table_args__ = (
        CheckConstraint("trim(code) <> ''", name="ck_microchips_code_not_blank"),
        # uniqueness only among active chips
        Index(
            CODE_UNIQUE_INDEX,
            "code",
            unique=True,
            sqlite_where=text("deleted = 0"),
            postgresql_where=text("deleted = false"),
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    deleted: Mapped[bool] = mapped_column(Boolean, default=False, server_default=false(), nullable=False)
    code: Mapped[str] = mapped_column(String(25), nullable=False)
    implanted_on: Mapped[date | None] = mapped_column(Date)
    clinic: Mapped[str | None] = mapped_column(String(120))
    notes: Mapped[str | None] = mapped_column(String(255))



class PetModel(Base):
    __tablename__ = "pets"
    __table_args__ = (
        CheckConstraint("trim(name) <> ''", name="ck_pets_name_not_blank"),
        CheckConstraint("trim(species) <> ''", name="ck_pets_species_not_blank"),
        CheckConstraint("trim(owner) <> ''", name="ck_pets_owner_not_blank"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    deleted: Mapped[bool] = mapped_column(Boolean, default=False, server_default=false(), nullable=False)
    name: Mapped[str] = mapped_column(String(60), nullable=False)
    species: Mapped[str] = mapped_column(String(30), nullable=False)
    breed: Mapped[str | None] = mapped_column(String(60))
    birth_date: Mapped[date | None] = mapped_column(Date)
    owner: Mapped[str] = mapped_column(String(120), nullable=False)
    microchip_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("microchips.id", ondelete="RESTRICT"),
        unique=True,
        nullable=True,
    )

    microchip: Mapped[MicrochipModel | None] = relationship(lazy="joined")


ModelT = TypeVar("ModelT", MicrochipModel, PetModel)


def is_active(model: type[ModelT]):
    """Predicate selecting rows that are not soft-deleted."""
    return model.deleted.is_(False)


def active(session: Session, model: type[ModelT]) -> Query[ModelT]:
    """Return a query over rows that are not soft-deleted."""
    return session.query(model).filter(is_active(model))
