"""Typed outcome returned by coordination operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from .exceptions import AppError, ErrorKind

T = TypeVar("T")


@dataclass(slots=True)
class OperationResult(Generic[T]):
    """Either the persisted value or the domain error that stopped the call."""

    operation: str
    value: T | None = None
    error: AppError | None = None

    @classmethod
    def success(cls, operation: str, value: T) -> "OperationResult[T]":
        return cls(operation=operation, value=value)

    @classmethod
    def failure(cls, operation: str, error: AppError) -> "OperationResult[T]":
        return cls(operation=operation, error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> ErrorKind | None:
        return self.error.kind if self.error is not None else None

    @property
    def message(self) -> str | None:
        return str(self.error) if self.error is not None else None

    def unwrap(self) -> T:
        """Return the value or re-raise the captured error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
