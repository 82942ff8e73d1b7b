"""Domain level exceptions and helpers for gateway layers."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from enum import StrEnum
from typing import Iterator

from sqlalchemy import exc as sa_exc

__all__ = [
    "ErrorKind",
    "AppError",
    "ValidationError",
    "NotFoundError",
    "DuplicateCodeError",
    "OwnershipMismatchError",
    "StoreError",
    "IntegrityConstraintViolation",
    "IdentityNotAssignedError",
    "TransactionClosedError",
    "ensure_found",
    "ensure_positive_id",
    "ensure_not_blank",
    "handle_sqlalchemy_errors",
]

CODE_UNIQUE_INDEX = "uq_microchips_code_active"


class ErrorKind(StrEnum):
    """Failure categories surfaced by the coordination layer."""

    VALIDATION = "validation"
    DUPLICATE_CODE = "duplicate_code"
    OWNERSHIP_MISMATCH = "ownership_mismatch"
    NOT_FOUND = "not_found"
    STORE = "store"


class AppError(Exception):
    """Base class for application specific errors."""

    kind: ErrorKind = ErrorKind.STORE


class ValidationError(AppError):
    """Raised before any store access when input is incomplete."""

    kind = ErrorKind.VALIDATION


class NotFoundError(AppError):
    """Raised when a record is absent or soft-deleted."""

    kind = ErrorKind.NOT_FOUND


class DuplicateCodeError(AppError):
    """Raised when an active microchip already uses the code."""

    kind = ErrorKind.DUPLICATE_CODE


class OwnershipMismatchError(AppError):
    """Raised when a microchip is not attached to the given pet."""

    kind = ErrorKind.OWNERSHIP_MISMATCH


class StoreError(AppError):
    """Base class for persistence layer failures."""

    kind = ErrorKind.STORE


class IntegrityConstraintViolation(StoreError):
    """Raised when a database constraint is violated."""


class IdentityNotAssignedError(StoreError):
    """Raised when the store did not hand back a primary key after insert."""


class TransactionClosedError(StoreError):
    """Raised when a transaction handle is finalized twice."""


@dataclass(slots=True)
class _EntityContext:
    """Internal helper describing the entity for error messages."""

    entity: str | None = None
    identifier: object | None = None

    def format(self, message: str) -> str:
        if self.entity and self.identifier is not None:
            return f"{self.entity} '{self.identifier}': {message}"
        if self.entity:
            return f"{self.entity}: {message}"
        return message


def ensure_found(record: object | None, *, entity: str, identifier: object) -> object:
    """Ensure a record exists, otherwise raise :class:`NotFoundError`."""

    if record is None:
        raise NotFoundError(f"{entity} '{identifier}' not found")
    return record


def ensure_positive_id(value: int | None, *, entity: str) -> int:
    if value is None or value <= 0:
        raise ValidationError(f"{entity} id must be greater than 0")
    return value


def ensure_not_blank(value: str | None, *, field: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field} must not be blank")
    return value.strip()


def _is_code_conflict(exc: sa_exc.IntegrityError) -> bool:
    text = str(exc.orig).lower()
    return "microchips.code" in text or CODE_UNIQUE_INDEX in text


def _translate_sqlalchemy_error(exc: Exception, *, context: _EntityContext) -> AppError:
    if isinstance(exc, sa_exc.IntegrityError):
        if _is_code_conflict(exc):
            return DuplicateCodeError(context.format("microchip code already in use"))
        return IntegrityConstraintViolation(context.format("integrity constraint violated"))
    if isinstance(exc, sa_exc.DBAPIError):
        return StoreError(context.format("database operation failed"))
    return StoreError(context.format(exc.__class__.__name__))


@contextmanager
def handle_sqlalchemy_errors(
    *, entity: str | None = None, identifier: object | None = None
) -> Iterator[None]:
    """Translate SQLAlchemy errors into domain specific ones."""

    context = _EntityContext(entity, identifier)
    try:
        yield
    except sa_exc.SQLAlchemyError as exc:
        raise _translate_sqlalchemy_error(exc, context=context) from exc
