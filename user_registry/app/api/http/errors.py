"""Mapping of domain and request errors to HTTP error envelopes."""

from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from loguru import logger
from starlette.responses import JSONResponse, Response

from user_registry.app.core.errors import (
    DuplicateEmailError,
    UserNotFoundError,
    UserValidationError,
)

_LOCATION_SOURCES = ("body", "path", "query", "header", "cookie")


def error_body(
    status_code: int,
    error: str,
    message: str,
    path: str,
    errors: list[str] | None = None,
) -> dict[str, Any]:
    body: dict[str, Any] = {
        "status": status_code,
        "error": error,
        "message": message,
    }
    if errors is not None:
        body["errors"] = errors
    body["path"] = path
    return body


def internal_error_body(path: str) -> dict[str, Any]:
    """Envelope for unexpected failures; never exposes exception details."""
    body = error_body(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal Server Error",
        "An unexpected error occurred",
        path,
    )
    body["timestamp"] = datetime.now(UTC).isoformat()
    return body


def _field_name(loc: tuple) -> str:
    parts = [str(part) for part in loc]
    if len(parts) > 1 and parts[0] in _LOCATION_SOURCES:
        parts = parts[1:]
    return ".".join(parts) or "request"


def _bad_request(request: Request, errors: list[str]) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(
            status.HTTP_400_BAD_REQUEST,
            "Bad Request",
            "Validation failed",
            request.url.path,
            errors,
        ),
    )


async def user_validation_handler(request: Request, exc: UserValidationError):
    logger.bind(errors=[str(e) for e in exc.errors]).warning("User payload rejected")
    return _bad_request(request, [str(e) for e in exc.errors])


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [f"{_field_name(err['loc'])}: {err['msg']}" for err in exc.errors()]
    logger.bind(errors=errors).warning("Malformed request rejected")
    return _bad_request(request, errors)


async def not_found_handler(request: Request, exc: UserNotFoundError):
    logger.warning("User {} not found", exc.user_id)
    return Response(status_code=status.HTTP_404_NOT_FOUND)


async def duplicate_email_handler(request: Request, exc: DuplicateEmailError):
    logger.warning("Duplicate email rejected: {}", exc.email)
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content=error_body(
            status.HTTP_409_CONFLICT,
            "Conflict",
            str(exc),
            request.url.path,
            [f"email: {exc}"],
        ),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(UserValidationError, user_validation_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(UserNotFoundError, not_found_handler)
    app.add_exception_handler(DuplicateEmailError, duplicate_email_handler)
