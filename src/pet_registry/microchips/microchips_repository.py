"""Microchip gateway backed by SQLAlchemy."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from sqlalchemy import update
from sqlalchemy.orm import Session

from ..db.db_models import MicrochipModel, active, is_active
from ..db.transactions import Transaction
from ..exceptions import (
    IdentityNotAssignedError,
    NotFoundError,
    handle_sqlalchemy_errors,
)
from .microchips_models import Microchip

ENTITY = "microchip"


class MicrochipRepository:
    """Single-entity reads and writes against the ``microchips`` table.

    Methods without a transaction argument open, commit and close their own
    session. The ``*_within`` variants write through the caller's
    :class:`Transaction` and never commit or roll back.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def insert(self, chip: Microchip) -> Microchip:
        with self._session_factory() as session:
            with handle_sqlalchemy_errors(entity=ENTITY, identifier=chip.code):
                self._insert(session, chip)
                session.commit()
        return chip

    def insert_within(self, chip: Microchip, tx: Transaction) -> Microchip:
        with handle_sqlalchemy_errors(entity=ENTITY, identifier=chip.code):
            return self._insert(tx.ensure_open(), chip)

    def update(self, chip: Microchip) -> Microchip:
        with self._session_factory() as session:
            with handle_sqlalchemy_errors(entity=ENTITY, identifier=chip.id):
                self._update(session, chip)
                session.commit()
        return chip

    def soft_delete(self, chip_id: int) -> None:
        with self._session_factory() as session:
            with handle_sqlalchemy_errors(entity=ENTITY, identifier=chip_id):
                self._soft_delete(session, chip_id)
                session.commit()

    def soft_delete_within(self, chip_id: int, tx: Transaction) -> None:
        with handle_sqlalchemy_errors(entity=ENTITY, identifier=chip_id):
            self._soft_delete(tx.ensure_open(), chip_id)

    def get_by_id(self, chip_id: int) -> Microchip | None:
        with self._session_factory() as session:
            with handle_sqlalchemy_errors(entity=ENTITY, identifier=chip_id):
                row = active(session, MicrochipModel).filter(MicrochipModel.id == chip_id).one_or_none()
                return self._to_domain(row) if row is not None else None

    def list_active(self) -> Sequence[Microchip]:
        with self._session_factory() as session:
            with handle_sqlalchemy_errors(entity=ENTITY):
                rows = active(session, MicrochipModel).order_by(MicrochipModel.id).all()
                return [self._to_domain(row) for row in rows]

    def find_by_code(self, code: str) -> Microchip | None:
        """Exact match on an active chip's code."""
        with self._session_factory() as session:
            with handle_sqlalchemy_errors(entity=ENTITY, identifier=code):
                row = (
                    active(session, MicrochipModel)
                    .filter(MicrochipModel.code == code.strip())
                    .one_or_none()
                )
                return self._to_domain(row) if row is not None else None

    @staticmethod
    def _insert(session: Session, chip: Microchip) -> Microchip:
        row = MicrochipModel(
            code=chip.code.strip(),
            implanted_on=chip.implanted_on,
            clinic=chip.clinic,
            notes=chip.notes,
        )
        session.add(row)
        session.flush()
        if row.id is None:
            raise IdentityNotAssignedError(f"{ENTITY} '{chip.code}': store did not assign an id")
        chip.id = row.id
        chip.code = row.code
        chip.deleted = False
        return chip

    @staticmethod
    def _update(session: Session, chip: Microchip) -> None:
        result = session.execute(
            update(MicrochipModel)
            .where(MicrochipModel.id == chip.id, is_active(MicrochipModel))
            .values(
                code=chip.code.strip(),
                implanted_on=chip.implanted_on,
                clinic=chip.clinic,
                notes=chip.notes,
            )
        )
        if result.rowcount == 0:
            raise NotFoundError(f"{ENTITY} '{chip.id}' not found")

    @staticmethod
    def _soft_delete(session: Session, chip_id: int) -> None:
        result = session.execute(
            update(MicrochipModel)
            .where(MicrochipModel.id == chip_id, is_active(MicrochipModel))
            .values(deleted=True)
        )
        if result.rowcount == 0:
            raise NotFoundError(f"{ENTITY} '{chip_id}' not found")

    @staticmethod
    def _to_domain(model: MicrochipModel) -> Microchip:
        return Microchip(
            id=model.id,
            code=model.code,
            implanted_on=model.implanted_on,
            clinic=model.clinic,
            notes=model.notes,
            deleted=model.deleted,
        )
