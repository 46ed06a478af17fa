"""Dependency injection for API routes."""

from healthscore.core.config import settings
from healthscore.core.hierarchy_loader import resolve_hierarchy
from healthscore.domain.models import KpiHierarchy


def get_configured_hierarchy() -> KpiHierarchy:
    """FastAPI dependency providing the hierarchy used when a request has none.

    HEALTHSCORE_HIERARCHY_PATH selects a custom document; otherwise the
    packaged default hierarchy is used. Either is loaded once and then served
    from the loader cache.
    """
    return resolve_hierarchy(settings.hierarchy_path)
