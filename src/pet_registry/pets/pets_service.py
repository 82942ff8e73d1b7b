"""Coordinate pet and microchip writes.

This service owns every cross-entity rule: a microchip gets its id before
the pet that references it is written, a chip is detached from its pet
before it is soft-deleted, and reassignment always clears the old
reference first. Public operations never raise domain errors; they return
an :class:`OperationResult` instead.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from typing import Any, TypeVar

import structlog
from sqlalchemy.exc import SQLAlchemyError

from ..db.transactions import TransactionManager
from ..exceptions import (
    AppError,
    NotFoundError,
    OwnershipMismatchError,
    StoreError,
    ValidationError,
    ensure_not_blank,
    ensure_positive_id,
)
from ..microchips.microchips_models import Microchip
from ..microchips.microchips_service import MicrochipService
from ..results import OperationResult
from .pets_models import Pet
from .pets_repository import PetRepository

logger = structlog.get_logger(__name__)

T = TypeVar("T")


@dataclass(slots=True)
class PetService:
    """Entry point used by the presentation layer."""

    repo: PetRepository
    microchips: MicrochipService
    transactions: TransactionManager

    # -- creation

    def create_pet(self, pet: Pet) -> OperationResult[Pet]:
        """Validate, persist the attached microchip first, then the pet."""
        return self._run("create_pet", lambda: self._create(pet), pet_name=_name_of(pet))

    def _create(self, pet: Pet) -> Pet:
        self._validate(pet)
        chip = pet.microchip
        if chip is not None:
            if chip.is_persisted:
                self.microchips.update(chip)
            else:
                self.microchips.create(chip)
        return self.repo.insert(pet)

    # -- detachment

    def detach_and_delete_microchip(self, pet_id: int, microchip_id: int) -> OperationResult[Pet]:
        """Clear the pet's reference, then soft-delete the chip, atomically."""
        return self._run(
            "detach_and_delete_microchip",
            lambda: self._detach_and_delete(pet_id, microchip_id),
            pet_id=pet_id,
            microchip_id=microchip_id,
        )

    def _detach_and_delete(self, pet_id: int, microchip_id: int) -> Pet:
        ensure_positive_id(pet_id, entity="pet")
        ensure_positive_id(microchip_id, entity="microchip")
        pet = self._load(pet_id)
        self._ensure_owns(pet, microchip_id)

        already_deleted = pet.microchip is not None and pet.microchip.deleted
        detached = replace(pet, microchip=None)
        with self.transactions.scope() as tx:
            self.repo.update_within(detached, tx)
            # chip removed by an unchecked delete; only the reference is left to clear
            if not already_deleted:
                self.microchips.repo.soft_delete_within(microchip_id, tx)
        return detached

    # -- unchecked deletion

    def delete_microchip_unchecked(self, microchip_id: int, *, force: bool = False) -> OperationResult[int]:
        """Soft-delete a chip without checking for an owning pet.

        Meant for cleaning up chips that were never assigned. A pet that
        still references the chip keeps pointing at an inactive record, so
        callers must pass ``force=True`` to acknowledge that.
        """
        return self._run(
            "delete_microchip_unchecked",
            lambda: self._delete_unchecked(microchip_id, force),
            microchip_id=microchip_id,
        )

    def _delete_unchecked(self, microchip_id: int, force: bool) -> int:
        if not force:
            raise ValidationError("unchecked microchip deletion requires force=True")
        self.microchips.delete(microchip_id)
        return microchip_id

    # -- atomic creation

    def create_pet_unvalidated(self, pet: Pet) -> OperationResult[Pet]:
        """Insert chip and pet in one transaction, skipping pet validation.

        Store-level rejections of the pet roll the chip insert back as well.
        """
        return self._run(
            "create_pet_unvalidated",
            lambda: self._create_atomically(pet),
            pet_name=_name_of(pet),
        )

    def _create_atomically(self, pet: Pet) -> Pet:
        chip = pet.microchip
        new_chip = chip is not None and not chip.is_persisted
        tx = self.transactions.begin()
        try:
            if new_chip:
                self.microchips.repo.insert_within(chip, tx)
            self.repo.insert_within(pet, tx)
            self.transactions.commit(tx)
        except BaseException:
            if not tx.closed:
                self.transactions.rollback(tx)
            pet.id = None
            if new_chip:
                chip.id = None
            raise
        return pet

    # -- pet maintenance

    def update_pet(self, pet: Pet) -> OperationResult[Pet]:
        return self._run("update_pet", lambda: self._update(pet), pet_id=getattr(pet, "id", None))

    def _update(self, pet: Pet) -> Pet:
        self._validate(pet)
        ensure_positive_id(pet.id, entity="pet")
        return self.repo.update(pet)

    def delete_pet(self, pet_id: int) -> OperationResult[int]:
        """Soft-delete the pet; its microchip stays active."""
        return self._run("delete_pet", lambda: self._delete(pet_id), pet_id=pet_id)

    def _delete(self, pet_id: int) -> int:
        ensure_positive_id(pet_id, entity="pet")
        self.repo.soft_delete(pet_id)
        return pet_id

    def get_pet(self, pet_id: int) -> OperationResult[Pet]:
        return self._run("get_pet", lambda: self._get(pet_id), pet_id=pet_id)

    def _get(self, pet_id: int) -> Pet:
        ensure_positive_id(pet_id, entity="pet")
        return self._load(pet_id)

    def list_pets(self) -> OperationResult[Sequence[Pet]]:
        return self._run("list_pets", self.repo.list_active)

    def search_pets(self, term: str) -> OperationResult[Sequence[Pet]]:
        """Active pets whose name or owner contains ``term`` (any case)."""
        return self._run(
            "search_pets",
            lambda: self.repo.search(ensure_not_blank(term, field="search term")),
            term=term,
        )

    def update_pet_microchip(self, pet_id: int, chip: Microchip) -> OperationResult[Pet]:
        """Edit the data of the chip currently attached to the pet."""
        return self._run(
            "update_pet_microchip",
            lambda: self._update_attached_chip(pet_id, chip),
            pet_id=pet_id,
        )

    def _update_attached_chip(self, pet_id: int, chip: Microchip) -> Pet:
        ensure_positive_id(pet_id, entity="pet")
        pet = self._load(pet_id)
        if pet.microchip_id is None:
            raise NotFoundError(f"pet '{pet_id}' has no microchip")
        if chip.id is not None and chip.id != pet.microchip_id:
            raise OwnershipMismatchError(f"microchip '{chip.id}' does not belong to pet '{pet_id}'")
        chip.id = pet.microchip_id
        self.microchips.update(chip)
        pet.microchip = chip
        return pet

    def reassign_microchip(self, pet_id: int, microchip_id: int) -> OperationResult[Pet]:
        """Point the pet at another active chip, clearing the old reference first."""
        return self._run(
            "reassign_microchip",
            lambda: self._reassign(pet_id, microchip_id),
            pet_id=pet_id,
            microchip_id=microchip_id,
        )

    def _reassign(self, pet_id: int, microchip_id: int) -> Pet:
        ensure_positive_id(pet_id, entity="pet")
        ensure_positive_id(microchip_id, entity="microchip")
        pet = self._load(pet_id)
        chip = self.microchips.get(microchip_id)
        if pet.microchip_id == microchip_id:
            return pet

        attached = replace(pet, microchip=chip)
        with self.transactions.scope() as tx:
            if pet.microchip_id is not None:
                self.repo.update_within(replace(pet, microchip=None), tx)
            self.repo.update_within(attached, tx)
        return attached

    # -- helpers

    def _load(self, pet_id: int) -> Pet:
        pet = self.repo.get_by_id(pet_id)
        if pet is None:
            raise NotFoundError(f"pet '{pet_id}' not found")
        return pet

    @staticmethod
    def _ensure_owns(pet: Pet, microchip_id: int) -> None:
        if pet.microchip_id != microchip_id:
            raise OwnershipMismatchError(
                f"microchip '{microchip_id}' does not belong to pet '{pet.id}'"
            )

    @staticmethod
    def _validate(pet: Pet | None) -> None:
        if pet is None:
            raise ValidationError("pet must be provided")
        pet.name = ensure_not_blank(pet.name, field="name")
        pet.species = ensure_not_blank(pet.species, field="species")
        pet.owner = ensure_not_blank(pet.owner, field="owner")

    def _run(self, operation: str, action: Callable[[], T], **context: Any) -> OperationResult[T]:
        log = logger.bind(operation=operation, **context)
        try:
            value = action()
        except StoreError as exc:
            wrapped = exc.__class__(f"{operation} failed ({_describe(context)}): {exc}")
            wrapped.__cause__ = exc
            log.error("pets.operation.store_error", error=str(exc))
            return OperationResult.failure(operation, wrapped)
        except AppError as exc:
            log.warning("pets.operation.rejected", kind=exc.kind.value, error=str(exc))
            return OperationResult.failure(operation, exc)
        except SQLAlchemyError as exc:
            error = StoreError(f"{operation} failed ({_describe(context)})")
            error.__cause__ = exc
            log.exception("pets.operation.unexpected_store_error")
            return OperationResult.failure(operation, error)
        log.info("pets.operation.ok")
        return OperationResult.success(operation, value)


def _name_of(pet: Pet | None) -> str | None:
    return pet.name if pet is not None else None


def _describe(context: dict[str, Any]) -> str:
    return ", ".join(f"{key}={value}" for key, value in context.items()) or "no context"
