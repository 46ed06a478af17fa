"""
Health check endpoints.

Provides system health information for monitoring.
"""

from fastapi import APIRouter

from healthscore import __version__
from healthscore.api.schemas import HealthResponse
from healthscore.core.config import settings
from healthscore.services.strategies import KpiCalculationStrategy

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint.

    Returns:
        Service status with the registered calculation strategies.
    """
    strategies = KpiCalculationStrategy.get_registered_strategies()
    return HealthResponse(
        status="healthy",
        version=__version__,
        debug=settings.debug,
        strategies=sorted(s.value for s in strategies),
    )
