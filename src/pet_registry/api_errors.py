"""Reusable error primitives for API exception handling."""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request, status
from fastapi.responses import JSONResponse

from .exceptions import AppError, ErrorKind
from .results import OperationResult

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 422,
    ErrorKind.DUPLICATE_CODE: status.HTTP_409_CONFLICT,
    ErrorKind.OWNERSHIP_MISMATCH: status.HTTP_409_CONFLICT,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.STORE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@dataclass(slots=True)
class ApiError(Exception):
    """Structured application-level error for HTTP handlers."""

    status_code: int
    code: str
    message: str

    def to_response(self) -> JSONResponse:
        """Materialise the error into a ``JSONResponse`` instance."""

        return JSONResponse(
            status_code=self.status_code,
            content={"error": {"code": self.code, "message": self.message}},
        )


async def api_error_handler(_: Request, exc: ApiError) -> JSONResponse:
    """Convert :class:`ApiError` exceptions into JSON payloads."""

    return exc.to_response()


def from_app_error(exc: AppError) -> ApiError:
    return ApiError(STATUS_BY_KIND[exc.kind], exc.kind.value, str(exc))


def unwrap_or_raise(result: OperationResult):
    """Return the result value or raise the matching :class:`ApiError`."""
    if result.error is not None:
        raise from_app_error(result.error)
    return result.value


__all__ = ["ApiError", "STATUS_BY_KIND", "api_error_handler", "from_app_error", "unwrap_or_raise"]
