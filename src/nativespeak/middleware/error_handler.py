"""Global error handler: consistent JSON error responses.

Every failure leaves the API as ``{"success": false, "code", "message"}``,
plus ``details`` for validation errors.
"""

import asyncio
from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import exc as sa_exc
from starlette.exceptions import HTTPException as StarletteHTTPException

from nativespeak.errors import AppError, TransientStoreFailure

logger = structlog.get_logger()

_HTTP_CODES = {
    401: "MissingCredential",
    403: "InvalidCredential",
    404: "NotFound",
}


def error_response(
    status_code: int,
    code: str,
    message: str,
    details: Any = None,  # noqa: ANN401
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build the uniform error envelope."""
    content: dict[str, Any] = {"success": False, "code": code, "message": message}
    if details is not None:
        content["details"] = jsonable_encoder(details)
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def _transient(request: Request, exc: Exception) -> JSONResponse:
    logger.warning(
        "store_unavailable",
        path=request.url.path,
        method=request.method,
        error_type=type(exc).__name__,
    )
    failure = TransientStoreFailure()
    return error_response(failure.status_code, failure.code, failure.message)


def _internal(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        exc_info=exc,
    )
    return error_response(500, "InternalFault", "Internal server error")


def setup_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(AppError)
    async def app_error_handler(_request: Request, exc: AppError) -> JSONResponse:
        """Handle domain errors raised by services and the auth gate."""
        return error_response(exc.status_code, exc.code, exc.message, exc.details)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """Handle routing/HTTP exceptions (404, 405, ...) with the same envelope."""
        code = _HTTP_CODES.get(exc.status_code, "HTTPError")
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        return error_response(exc.status_code, code, message, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
        """Handle request validation errors as 400 ValidationError."""
        return error_response(400, "ValidationError", "Invalid data", exc.errors())

    @app.exception_handler(sa_exc.DBAPIError)
    async def dbapi_exception_handler(request: Request, exc: sa_exc.DBAPIError) -> JSONResponse:
        """Connection-level failures are transient; anything else is a fault."""
        if exc.connection_invalidated or isinstance(exc, (sa_exc.OperationalError, sa_exc.InterfaceError)):
            return _transient(request, exc)
        return _internal(request, exc)

    @app.exception_handler(sa_exc.TimeoutError)
    async def pool_timeout_handler(request: Request, exc: sa_exc.TimeoutError) -> JSONResponse:
        """Connection pool checkout timed out."""
        return _transient(request, exc)

    @app.exception_handler(asyncio.TimeoutError)
    async def command_timeout_handler(request: Request, exc: asyncio.TimeoutError) -> JSONResponse:
        """A database command exceeded its timeout."""
        return _transient(request, exc)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Anything unanticipated becomes an opaque 500."""
        return _internal(request, exc)
