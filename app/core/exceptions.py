"""
Global exception handling for the application.
Every failure is rendered as {"error": <message>, "code": <kind>} plus optional "details".
Server-side failures never carry internal detail.
"""

from enum import Enum
from http import HTTPStatus
from typing import Any, Dict, List, Optional

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = structlog.get_logger(__name__)

GENERIC_ERROR_MESSAGE = "Internal server error"


class ErrorKind(str, Enum):
    MALFORMED_BODY = "MalformedBody"
    VALIDATION_FAILED = "ValidationFailed"
    DUPLICATE_EMAIL = "DuplicateEmail"
    PAYLOAD_TOO_LARGE = "PayloadTooLarge"
    STORE_UNAVAILABLE = "StoreUnavailable"
    UNKNOWN = "Unknown"


class AppError(Exception):
    """Base class for all application exceptions."""

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    @property
    def is_client_error(self) -> bool:
        return self.status_code < 500

    def to_response(self) -> Dict[str, Any]:
        content: Dict[str, Any] = {"error": self.message, "code": self.kind.value}
        if self.details and self.is_client_error:
            content["details"] = self.details
        return content


class MalformedBodyError(AppError):
    """Request body could not be decoded into a JSON object."""

    kind = ErrorKind.MALFORMED_BODY

    def __init__(self, message: str = "Invalid data format", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, details)


class ValidationFailedError(AppError):
    """One or more fields failed validation."""

    kind = ErrorKind.VALIDATION_FAILED

    def __init__(
        self,
        fields: List[str],
        errors: Optional[List[Dict[str, str]]] = None,
        message: str = "Invalid input data",
    ):
        self.fields = list(fields)
        self.errors = errors or [{"field": f, "message": "invalid value"} for f in self.fields]
        super().__init__(
            message,
            status.HTTP_400_BAD_REQUEST,
            {"fields": self.fields, "errors": self.errors},
        )


class DuplicateEmailError(AppError):
    kind = ErrorKind.DUPLICATE_EMAIL

    def __init__(self, message: str = "Email is already registered"):
        super().__init__(message, status.HTTP_409_CONFLICT)


class PayloadTooLargeError(AppError):
    kind = ErrorKind.PAYLOAD_TOO_LARGE

    def __init__(self, limit: int):
        super().__init__(
            "Request body too large",
            status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            {"limit_bytes": limit},
        )


class StoreUnavailableError(AppError):
    """Database connection or transport failure."""

    kind = ErrorKind.STORE_UNAVAILABLE

    def __init__(self, message: str = GENERIC_ERROR_MESSAGE):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR)


class InternalError(AppError):
    kind = ErrorKind.UNKNOWN

    def __init__(self, message: str = GENERIC_ERROR_MESSAGE):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render an AppError with its declared status."""
    log = logger.warning if exc.is_client_error else logger.error
    log(
        "Request failed",
        kind=exc.kind.value,
        status_code=exc.status_code,
        path=request.url.path,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Unknown routes, disallowed methods and other framework-raised errors."""
    try:
        code = HTTPStatus(exc.status_code).phrase.replace(" ", "").replace("-", "")
    except ValueError:
        code = "HttpError"
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail, "code": code},
        headers=getattr(exc, "headers", None),
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all uncaught exceptions globally."""
    logger.exception("Unhandled exception", path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": GENERIC_ERROR_MESSAGE, "code": ErrorKind.UNKNOWN.value},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
