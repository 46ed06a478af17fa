"""
API request/response schemas.

Pydantic models for API validation and serialization.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from healthscore.domain.models import KpiHierarchy, RawMeasurement


class CalculateKpisRequest(BaseModel):
    """Request to evaluate a hierarchy against raw measurements."""

    hierarchy: Optional[KpiHierarchy] = Field(
        default=None,
        description="Hierarchy definition (default: the configured hierarchy)",
    )
    measurements: List[RawMeasurement] = Field(default_factory=list)
    strict: Optional[bool] = Field(
        default=None,
        description="Strict error propagation (default: HEALTHSCORE_STRICT_MODE)",
    )


class HealthResponse(BaseModel):
    """Service health status."""

    status: str
    version: str
    debug: bool
    strategies: List[str]
