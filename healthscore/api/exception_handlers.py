"""
Global exception handlers for FastAPI.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

import structlog

from healthscore.core.exceptions import ConfigurationError, HealthScoreError

log = structlog.get_logger(__name__)


def setup_exception_handlers(app: FastAPI):
    """Register custom exception handlers with the FastAPI application.

    Configuration problems in the submitted hierarchy (unknown strategy,
    invalid structure, unsupported schema version, unreadable document) are
    client errors; every other application or unexpected error is a 500.
    """

    @app.exception_handler(HealthScoreError)
    async def health_score_error_handler(
        request: Request,
        exc: HealthScoreError,
    ) -> JSONResponse:
        """Handle HealthScoreError exceptions with a consistent error body."""
        log_ctx = log.bind(
            path=request.url.path,
            method=request.method,
            error_type=type(exc).__name__,
        )

        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        if isinstance(exc, ConfigurationError):
            status_code = status.HTTP_400_BAD_REQUEST

        log_ctx.warning(
            "request_error",
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
        """Handle all unhandled exceptions with HTTP 500 status."""
        log_ctx = log.bind(
            path=request.url.path,
            method=request.method,
            error_type=type(exc).__name__,
        )

        log_ctx.error(
            "unhandled_exception",
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
