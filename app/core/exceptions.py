"""
Application error taxonomy and global exception handlers.

Handlers raise the ``AppError`` subclasses below; the boundary maps each
one to its fixed HTTP status.  Anything unclassified becomes a generic 500
so stack traces, query text and internal identifiers never reach clients.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)


# ── Error kinds ─────────────────────────────────────────────────────
class AppError(Exception):
    """Base class for errors that carry their own client-safe response."""

    status_code: int = 500
    detail: str = "Internal server error"
    headers: dict[str, str] | None = None

    def __init__(self, detail: str | None = None) -> None:
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class InvalidInputError(AppError, ValueError):
    status_code = 400
    detail = "Invalid input"


class DuplicateEmailError(AppError):
    status_code = 409
    detail = "Email already in use"


class InvalidCredentialsError(AppError):
    """Used for both unknown email and wrong password."""

    status_code = 401
    detail = "Invalid credentials"


class UnauthorizedError(AppError):
    status_code = 401
    detail = "Unauthorized"
    headers = {"WWW-Authenticate": "Bearer"}


class NotFoundError(AppError):
    status_code = 404
    detail = "Not found"


class InfrastructureError(AppError):
    status_code = 500
    detail = "Internal server error"
    retryable = False


class DatastoreUnavailableError(InfrastructureError):
    """Connection-level datastore failure (pool exhausted, network lost)."""

    detail = "Service temporarily unavailable"
    retryable = True


# ── Handlers ────────────────────────────────────────────────────────
def _error_body(detail: str) -> dict:
    return {"detail": detail, "success": False}


async def _app_error_handler(_request: Request, exc: AppError) -> JSONResponse:
    if isinstance(exc, InfrastructureError):
        logger.error("%s (retryable=%s): %s", type(exc).__name__, exc.retryable, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.detail),
        headers=exc.headers,
    )


async def _validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())[1:]) or "body",
            "message": err.get("msg", "Invalid value"),
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={**_error_body("Validation failed"), "errors": errors},
    )


async def _http_exception_handler(_request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def _generic_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception: %s", exc)
    return JSONResponse(
        status_code=500,
        content=_error_body("Internal server error"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all exception handlers to the FastAPI app."""
    app.add_exception_handler(AppError, _app_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(HTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _generic_exception_handler)
