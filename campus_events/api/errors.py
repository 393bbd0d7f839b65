"""
Exception handlers - Map domain errors to HTTP responses.

All error bodies share one shape: ``{"msg": ..., "errors": [...]}`` where
``errors`` lists per-field failures and is only present for validation.

Handlers:
    domain_exception_handler: CampusEventsError subclasses -> 400/401/403/404
    validation_exception_handler: RequestValidationError -> 400
    http_exception_handler: Starlette HTTPException (unknown routes, methods)
    database_unavailable_handler: pool timeouts / lost connections -> 503
    generic_exception_handler: anything else -> 500
"""

import logging

import psycopg
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from psycopg_pool import PoolTimeout
from starlette.exceptions import HTTPException as StarletteHTTPException

from campus_events.config.settings import get_settings
from campus_events.domain.exceptions import (
    AuthenticationRequired,
    CampusEventsError,
    CapacityExceeded,
    Conflict,
    Forbidden,
    InvalidInput,
    NotFound,
)

logger = logging.getLogger(__name__)

# First match wins; order subclasses before their bases
_STATUS_BY_ERROR: list[tuple[type[CampusEventsError], int]] = [
    (InvalidInput, status.HTTP_400_BAD_REQUEST),
    (AuthenticationRequired, status.HTTP_401_UNAUTHORIZED),
    (Forbidden, status.HTTP_403_FORBIDDEN),
    (NotFound, status.HTTP_404_NOT_FOUND),
    (Conflict, status.HTTP_400_BAD_REQUEST),
    (CapacityExceeded, status.HTTP_400_BAD_REQUEST),
]


def status_for(exc: CampusEventsError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


async def domain_exception_handler(request: Request, exc: CampusEventsError) -> JSONResponse:
    body: dict = {"msg": exc.message}
    if isinstance(exc, InvalidInput):
        body["errors"] = [{"param": e.param, "msg": e.msg} for e in exc.errors]
    return JSONResponse(status_code=status_for(exc), content=body)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report request-shape failures as 400 with one entry per field."""
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        errors.append({"param": ".".join(location) or "body", "msg": error.get("msg", "")})
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"msg": "Invalid input", "errors": errors},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"msg": exc.detail},
        headers=exc.headers,
    )


async def database_unavailable_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Database unavailable during %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"msg": "Database connection unavailable. Please try again later."},
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Hide internals outside development mode."""
    logger.exception("Unhandled error during %s %s", request.method, request.url.path)
    detail = str(exc) if get_settings().is_development else "An unexpected error occurred"
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"msg": "Server Error", "error": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(CampusEventsError, domain_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(PoolTimeout, database_unavailable_handler)
    app.add_exception_handler(psycopg.OperationalError, database_unavailable_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
