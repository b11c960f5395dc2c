"""
Global exception handlers for FastAPI.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
import structlog

from dojo.core.exceptions import (
    AlreadyLoggedInError,
    ConfigurationError,
    DojoError,
    NotLoggedInError,
    OracleFailure,
    OracleTimeoutError,
    SessionBusyError,
    ValidationError,
)

log = structlog.get_logger(__name__)


def _status_for(exc: DojoError) -> int:
    if isinstance(exc, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, NotLoggedInError):
        return status.HTTP_401_UNAUTHORIZED
    if isinstance(exc, (AlreadyLoggedInError, SessionBusyError)):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, OracleTimeoutError):
        return status.HTTP_504_GATEWAY_TIMEOUT
    if isinstance(exc, OracleFailure):
        return status.HTTP_502_BAD_GATEWAY
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def setup_exception_handlers(app: FastAPI):
    """Register custom exception handlers with the FastAPI application.

    DojoError subclasses map to HTTP status codes with a consistent
    ``{"error": {"type", "message"}}`` body; configuration errors and
    anything unhandled become a generic 500.
    """

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(
        request: Request,
        exc: ConfigurationError,
    ) -> JSONResponse:
        log.error(
            "configuration_error",
            path=request.url.path,
            message=exc.message,
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "type": "ConfigurationError",
                    "message": "Server configuration error",
                }
            },
        )

    @app.exception_handler(DojoError)
    async def dojo_error_handler(
        request: Request,
        exc: DojoError,
    ) -> JSONResponse:
        status_code = _status_for(exc)

        log.warning(
            "request_error",
            path=request.url.path,
            method=request.method,
            error_type=type(exc).__name__,
            message=exc.message,
            status_code=status_code,
        )

        return JSONResponse(
            status_code=status_code,
            content={
                "error": {
                    "type": type(exc).__name__,
                    "message": exc.message,
                }
            },
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        log.error(
            "unhandled_exception",
            path=request.url.path,
            method=request.method,
            error_type=type(exc).__name__,
            message=str(exc),
            exc_info=exc,
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "type": "InternalServerError",
                    "message": "An unexpected error occurred",
                }
            },
        )
