"""Domain models package."""

from .hierarchy import (
    KpiEdge,
    KpiHierarchy,
    KpiNode,
    LATEST_SCHEMA_VERSION,
    MetaInfo,
    SCHEMA_VERSIONS,
    StrategyId,
    Threshold,
)
from .measurement import KpiType, RawMeasurement
from .outcome import Error, Outcome, Success
from .result import KpiResultEdge, KpiResultHierarchy, KpiResultNode

__all__ = [
    "KpiEdge",
    "KpiHierarchy",
    "KpiNode",
    "LATEST_SCHEMA_VERSION",
    "MetaInfo",
    "SCHEMA_VERSIONS",
    "StrategyId",
    "Threshold",
    "KpiType",
    "RawMeasurement",
    "Error",
    "Outcome",
    "Success",
    "KpiResultEdge",
    "KpiResultHierarchy",
    "KpiResultNode",
]
