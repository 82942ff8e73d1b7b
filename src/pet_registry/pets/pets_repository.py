"""Pet gateway backed by SQLAlchemy."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from sqlalchemy import or_, update
from sqlalchemy.orm import Session

from ..db.db_models import PetModel, active, is_active
from ..db.transactions import Transaction
from ..exceptions import (
    IdentityNotAssignedError,
    NotFoundError,
    handle_sqlalchemy_errors,
)
from ..microchips.microchips_repository import MicrochipRepository
from .pets_models import Pet

ENTITY = "pet"


class PetRepository:
    """Single-entity reads and writes against the ``pets`` table."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def insert(self, pet: Pet) -> Pet:
        with self._session_factory() as session:
            with handle_sqlalchemy_errors(entity=ENTITY, identifier=pet.name):
                self._insert(session, pet)
                session.commit()
        return pet

    def insert_within(self, pet: Pet, tx: Transaction) -> Pet:
        with handle_sqlalchemy_errors(entity=ENTITY, identifier=pet.name):
            return self._insert(tx.ensure_open(), pet)

    def update(self, pet: Pet) -> Pet:
        with self._session_factory() as session:
            with handle_sqlalchemy_errors(entity=ENTITY, identifier=pet.id):
                self._update(session, pet)
                session.commit()
        return pet

    def update_within(self, pet: Pet, tx: Transaction) -> Pet:
        with handle_sqlalchemy_errors(entity=ENTITY, identifier=pet.id):
            self._update(tx.ensure_open(), pet)
        return pet

    def soft_delete(self, pet_id: int) -> None:
        with self._session_factory() as session:
            with handle_sqlalchemy_errors(entity=ENTITY, identifier=pet_id):
                result = session.execute(
                    update(PetModel)
                    .where(PetModel.id == pet_id, is_active(PetModel))
                    .values(deleted=True)
                )
                if result.rowcount == 0:
                    raise NotFoundError(f"{ENTITY} '{pet_id}' not found")
                session.commit()

    def get_by_id(self, pet_id: int) -> Pet | None:
        with self._session_factory() as session:
            with handle_sqlalchemy_errors(entity=ENTITY, identifier=pet_id):
                row = active(session, PetModel).filter(PetModel.id == pet_id).one_or_none()
                return self._to_domain(row) if row is not None else None

    def list_active(self) -> Sequence[Pet]:
        with self._session_factory() as session:
            with handle_sqlalchemy_errors(entity=ENTITY):
                rows = active(session, PetModel).order_by(PetModel.id).all()
                return [self._to_domain(row) for row in rows]

    def search(self, term: str) -> Sequence[Pet]:
        """Case-insensitive substring match on name or owner."""
        pattern = f"%{term.strip()}%"
        with self._session_factory() as session:
            with handle_sqlalchemy_errors(entity=ENTITY, identifier=term):
                rows = (
                    active(session, PetModel)
                    .filter(or_(PetModel.name.ilike(pattern), PetModel.owner.ilike(pattern)))
                    .order_by(PetModel.id)
                    .all()
                )
                return [self._to_domain(row) for row in rows]

    @staticmethod
    def _insert(session: Session, pet: Pet) -> Pet:
        row = PetModel(
            name=pet.name,
            species=pet.species,
            breed=pet.breed,
            birth_date=pet.birth_date,
            owner=pet.owner,
            microchip_id=pet.microchip_id,
        )
        session.add(row)
        session.flush()
        if row.id is None:
            raise IdentityNotAssignedError(f"{ENTITY} '{pet.name}': store did not assign an id")
        pet.id = row.id
        pet.deleted = False
        return pet

    @staticmethod
    def _update(session: Session, pet: Pet) -> None:
        result = session.execute(
            update(PetModel)
            .where(PetModel.id == pet.id, is_active(PetModel))
            .values(
                name=pet.name,
                species=pet.species,
                breed=pet.breed,
                birth_date=pet.birth_date,
                owner=pet.owner,
                microchip_id=pet.microchip_id,
            )
        )
        if result.rowcount == 0:
            raise NotFoundError(f"{ENTITY} '{pet.id}' not found")

    @staticmethod
    def _to_domain(model: PetModel) -> Pet:
        chip = model.microchip
        return Pet(
            id=model.id,
            name=model.name,
            species=model.species,
            breed=model.breed,
            birth_date=model.birth_date,
            owner=model.owner,
            microchip=MicrochipRepository._to_domain(chip) if chip is not None else None,
            deleted=model.deleted,
        )
