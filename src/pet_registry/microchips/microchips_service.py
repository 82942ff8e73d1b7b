"""Validation and uniqueness rules for microchips."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import structlog

from ..exceptions import (
    DuplicateCodeError,
    ValidationError,
    ensure_found,
    ensure_not_blank,
    ensure_positive_id,
)
from .microchips_models import Microchip
from .microchips_repository import MicrochipRepository

logger = structlog.get_logger(__name__)


@dataclass(slots=True)
class MicrochipService:
    """Single-entity microchip operations; raises domain errors."""

    repo: MicrochipRepository

    def create(self, chip: Microchip) -> Microchip:
        self.validate(chip)
        self.ensure_code_available(chip.code)
        self.repo.insert(chip)
        logger.info("microchips.create.ok", microchip_id=chip.id, code=chip.code)
        return chip

    def update(self, chip: Microchip) -> Microchip:
        self.validate(chip)
        ensure_positive_id(chip.id, entity="microchip")
        self.ensure_code_available(chip.code, microchip_id=chip.id)
        self.repo.update(chip)
        logger.info("microchips.update.ok", microchip_id=chip.id)
        return chip

    def delete(self, chip_id: int) -> None:
        """Soft-delete without looking for an owning pet."""
        ensure_positive_id(chip_id, entity="microchip")
        self.repo.soft_delete(chip_id)
        logger.warning("microchips.delete.unchecked", microchip_id=chip_id)

    def get(self, chip_id: int) -> Microchip:
        ensure_positive_id(chip_id, entity="microchip")
        chip = self.repo.get_by_id(chip_id)
        ensure_found(chip, entity="microchip", identifier=chip_id)
        return chip  # type: ignore[return-value]

    def list_active(self) -> Sequence[Microchip]:
        return self.repo.list_active()

    @staticmethod
    def validate(chip: Microchip | None) -> None:
        if chip is None:
            raise ValidationError("microchip must be provided")
        chip.code = ensure_not_blank(chip.code, field="code")

    def ensure_code_available(self, code: str, *, microchip_id: int | None = None) -> None:
        """Early rejection of duplicates; the unique index stays the final authority."""
        existing = self.repo.find_by_code(code)
        if existing is None:
            return
        if microchip_id is None or existing.id != microchip_id:
            raise DuplicateCodeError(f"a microchip with code '{code.strip()}' already exists")
