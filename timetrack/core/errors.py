from __future__ import annotations

import logging
from typing import Any, Mapping

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("timetrack.errors")


class ErrorEnvelope(JSONResponse):
    def __init__(
        self,
        *,
        status_code: int,
        code: str,
        message: str,
        details: Any | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        payload: dict[str, Any] = {"code": code, "message": message}
        if details is not None:
            payload["details"] = details
        super().__init__(payload, status_code=status_code, headers=headers)


class TrackerError(Exception):
    """Base class for every failure the API turns into an HTTP response.

    Subclasses pin the status code, the machine readable ``code`` and a default
    client-facing message. ``log_level`` is ``None`` for expected client errors
    so they never show up as failures in the logs.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "error"
    default_message: str = "Internal error"
    log_level: int | None = logging.ERROR

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class StoreError(TrackerError):
    code = "store_error"
    default_message = "Database operation failed"


class HashError(TrackerError):
    code = "hash_error"
    default_message = "Password hashing failed"


class UpdateFailed(TrackerError):
    code = "update_failed"
    default_message = "Update failed"
    log_level = logging.WARNING


class DuplicateAccount(TrackerError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "duplicate_account"
    default_message = "A user already exists with this username"
    log_level = None


class InvalidInput(TrackerError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "invalid_input"
    default_message = "Invalid request"
    log_level = None


class AccountNotFound(TrackerError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "account_not_found"
    default_message = "No user found with this username"
    log_level = None


class InvalidCredentials(TrackerError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "invalid_credentials"
    default_message = "Incorrect Password"
    log_level = None


def require_fields(payload: Mapping[str, Any], *names: str) -> None:
    """Raise :class:`InvalidInput` unless every named field holds a value."""

    missing = [name for name in names if payload.get(name) in (None, "")]
    if missing:
        raise InvalidInput(f"Missing required field(s): {', '.join(missing)}")


async def tracker_error_handler(request: Request, exc: TrackerError):
    if exc.log_level is not None:
        extra = {
            "extra_data": {
                "method": request.method,
                "path": request.url.path,
                "code": exc.code,
            }
        }
        # Only server-side failures carry a traceback worth keeping.
        exc_info = exc if exc.log_level >= logging.ERROR else None
        logger.log(exc.log_level, "request.failed: %s", exc.message, exc_info=exc_info, extra=extra)
    return ErrorEnvelope(status_code=exc.status_code, code=exc.code, message=exc.message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail
    message = detail if isinstance(detail, str) else "Error"
    details = detail if isinstance(detail, dict) else None
    return ErrorEnvelope(
        status_code=exc.status_code,
        code="http_error",
        message=message,
        details=details,
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return ErrorEnvelope(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        code="validation_error",
        message="Validation failed",
        details={"errors": jsonable_encoder(exc.errors())},
    )
