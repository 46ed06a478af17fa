"""
FastAPI application entry point.

Run with: uvicorn healthscore.main:app --reload
"""

from contextlib import asynccontextmanager
import uuid

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from healthscore import __version__
from healthscore.core.config import settings
from healthscore.core.logging import configure_logging
from healthscore.api.routes import health, kpis
from healthscore.api.exception_handlers import setup_exception_handlers

# Configure logging before anything else
configure_logging()
log = structlog.get_logger(__name__)


# =============================================================================
# Correlation ID Middleware
# =============================================================================


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware that adds a unique correlation ID to each request.

    - Generates a UUID4 request_id for each incoming request
    - Binds it to structlog context for all logs in that request
    - Adds X-Request-ID header to responses
    """

    async def dispatch(self, request: Request, call_next):
        """Process request and add correlation ID."""
        request_id = str(uuid.uuid4())

        with structlog.contextvars.bound_contextvars(request_id=request_id):
            response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events.
    """
    log.info(
        "application_starting",
        debug=settings.debug,
        strict_mode=settings.strict_mode,
        hierarchy_path=str(settings.resolved_hierarchy_path()),
    )

    yield

    log.info("application_shutting_down")


app = FastAPI(
    title="Project Health Score",
    description="KPI hierarchy evaluation for software project health scores",
    version=__version__,
    lifespan=lifespan,
    debug=settings.debug,
)

# CORS middleware for development
if settings.debug:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.add_middleware(CorrelationIDMiddleware)

setup_exception_handlers(app)

app.include_router(health.router, tags=["system"])
app.include_router(kpis.router)


@app.get("/")
async def root():
    """Root endpoint with basic info."""
    return {"name": "Project Health Score", "version": __version__, "status": "running"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "healthscore.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
