"""
Exception handlers - Map domain errors to JSON error responses.

Every failure response has the shape {"error": <message>, "code": <code>}.
Dependency failures keep their details in the logs only.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.domain.exceptions import (
    DependencyFailure,
    InvalidCredentials,
    NotAuthenticated,
    RegistrationError,
    UserNotFound,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: dict[type[RegistrationError], int] = {
    InvalidCredentials: status.HTTP_401_UNAUTHORIZED,
    NotAuthenticated: status.HTTP_401_UNAUTHORIZED,
    UserNotFound: status.HTTP_404_NOT_FOUND,
    DependencyFailure: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(exc: RegistrationError) -> int:
    """HTTP status for a domain error; user-correctable errors default to 400."""
    for error_type in type(exc).__mro__:
        if error_type in _STATUS_BY_ERROR:
            return _STATUS_BY_ERROR[error_type]
    return status.HTTP_400_BAD_REQUEST


def error_response(exc: RegistrationError, status_code: int | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code or status_for(exc),
        content={"error": exc.message, "code": exc.code},
    )


def _field_name(loc: tuple) -> str:
    parts = [str(part) for part in loc if part not in ("body", "query", "path")]
    return ".".join(parts) or "body"


async def handle_registration_error(request: Request, exc: RegistrationError) -> JSONResponse:
    if isinstance(exc, DependencyFailure):
        logger.error(
            "Dependency failure on %s %s",
            request.method,
            request.url.path,
            exc_info=(type(exc), exc, exc.__traceback__),
        )
    return error_response(exc)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {"type": "value_error", "loc": ("body",)}
    field = _field_name(tuple(first.get("loc", ())))
    if first.get("type") == "missing":
        message = f"Missing required field: {field}"
    elif field == "body":
        message = "Invalid request body"
    else:
        message = f"Invalid value for field: {field}"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": message, "code": "validation_error"},
    )


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail), "code": None},
        headers=getattr(exc, "headers", None),
    )


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RegistrationError, handle_registration_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
