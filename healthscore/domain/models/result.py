"""Domain models for the evaluated result hierarchy.

A result hierarchy mirrors the definition it was computed from node for
node and records, for every node, its outcome and the evidence it was
computed from (measurement id and origin).
"""

from datetime import datetime, timezone
from typing import Iterator, Optional, Tuple

from pydantic import Field

from healthscore.domain.models.base import DomainModel
from healthscore.domain.models.hierarchy import (
    LATEST_SCHEMA_VERSION,
    MetaInfo,
    StrategyId,
    Threshold,
)
from healthscore.domain.models.outcome import Outcome


class KpiResultNode(DomainModel):
    """Evaluated counterpart of a KpiNode."""

    type_id: str
    strategy: StrategyId
    result: Outcome
    id: str
    edges: Tuple["KpiResultEdge", ...] = ()
    origin_id: Optional[str] = None
    thresholds: Tuple[Threshold, ...] = ()
    display_name: Optional[str] = None
    meta_info: Optional[MetaInfo] = None

    def walk(self) -> Iterator["KpiResultNode"]:
        """Yield this node and every descendant, pre-order."""
        yield self
        for edge in self.edges:
            yield from edge.target.walk()


class KpiResultEdge(DomainModel):
    """Edge of the result tree.

    planned_weight is the weight configured in the definition, actual_weight
    the share the strategy really used (0 for children left out).
    """

    target: KpiResultNode
    planned_weight: float
    actual_weight: float


KpiResultNode.model_rebuild()


class KpiResultHierarchy(DomainModel):
    """Versioned, timestamped evaluation result."""

    root: KpiResultNode
    schema_version: str = LATEST_SCHEMA_VERSION
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def create(cls, root: KpiResultNode) -> "KpiResultHierarchy":
        return cls(root=root, schema_version=LATEST_SCHEMA_VERSION)
