"""
API routes for KPI calculation.

POST /kpis/calculate - Evaluate a hierarchy against raw measurements
GET /kpis/default-hierarchy - The hierarchy used when a request has none
"""

from fastapi import APIRouter, Depends

import structlog

from healthscore.api.dependencies import get_configured_hierarchy
from healthscore.api.schemas import CalculateKpisRequest
from healthscore.core.config import settings
from healthscore.domain.models import KpiHierarchy, KpiResultHierarchy
from healthscore.services.calculator import calculate_kpis_async

log = structlog.get_logger(__name__)
router = APIRouter(prefix="/kpis", tags=["kpis"])


@router.post("/calculate", response_model=KpiResultHierarchy)
async def calculate(
    request: CalculateKpisRequest,
    configured: KpiHierarchy = Depends(get_configured_hierarchy),
) -> KpiResultHierarchy:
    """
    Evaluate the submitted (or configured) hierarchy.

    Node-level problems (missing measurements, bad thresholds) come back as
    error outcomes inside the result; an invalid hierarchy is rejected with 400.
    """
    hierarchy = request.hierarchy or configured
    strict = settings.strict_mode if request.strict is None else request.strict

    log.info(
        "kpi_calculation_requested",
        custom_hierarchy=request.hierarchy is not None,
        measurements=len(request.measurements),
        strict=strict,
    )

    return await calculate_kpis_async(hierarchy, request.measurements, strict=strict)


@router.get("/default-hierarchy", response_model=KpiHierarchy)
async def default_hierarchy(
    configured: KpiHierarchy = Depends(get_configured_hierarchy),
) -> KpiHierarchy:
    """Hierarchy definition used when a calculation request has none."""
    return configured
