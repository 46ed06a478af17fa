"""Domain models for the KPI hierarchy definition.

The hierarchy describes how raw measurements combine into the overall
health score: every node names a KPI type and the strategy used to compute
it, and weighted edges point at the nodes it is computed from. Definitions
are immutable and may share subtrees (the same node object reachable from
several parents).
"""

from enum import Enum
from typing import FrozenSet, Iterator, List, Optional, Tuple

from pydantic import Field, field_serializer, field_validator

from healthscore.domain.models.base import DomainModel

# Supported hierarchy document versions, oldest first. New documents are
# stamped with the latest one.
SCHEMA_VERSIONS: Tuple[str, ...] = tuple(sorted(("1.0.0", "1.1.0")))
LATEST_SCHEMA_VERSION = SCHEMA_VERSIONS[-1]


class StrategyId(str, Enum):
    """Identifiers of the KPI calculation strategies."""

    RAW_VALUE_STRATEGY = "RAW_VALUE_STRATEGY"
    WEIGHTED_AVERAGE_STRATEGY = "WEIGHTED_AVERAGE_STRATEGY"
    WEIGHTED_RATIO_STRATEGY = "WEIGHTED_RATIO_STRATEGY"
    MINIMUM_STRATEGY = "MINIMUM_STRATEGY"
    MAXIMUM_STRATEGY = "MAXIMUM_STRATEGY"
    WEIGHTED_MINIMUM_STRATEGY = "WEIGHTED_MINIMUM_STRATEGY"
    WEIGHTED_MAXIMUM_STRATEGY = "WEIGHTED_MAXIMUM_STRATEGY"
    AND_STRATEGY = "AND_STRATEGY"
    OR_STRATEGY = "OR_STRATEGY"
    XOR_STRATEGY = "XOR_STRATEGY"


class Threshold(DomainModel):
    """Named integer threshold attached to a node (e.g. warning=50)."""

    name: str
    value: int


class MetaInfo(DomainModel):
    """Descriptive metadata carried through to the result."""

    description: Optional[str] = None
    tags: FrozenSet[str] = Field(default_factory=frozenset)

    @field_serializer("tags")
    def _serialize_tags(self, tags: FrozenSet[str]) -> List[str]:
        return sorted(tags)


class KpiNode(DomainModel):
    """A node of the hierarchy definition."""

    type_id: str
    strategy: StrategyId
    edges: Tuple["KpiEdge", ...] = ()
    thresholds: Tuple[Threshold, ...] = ()
    display_name: Optional[str] = None
    meta_info: Optional[MetaInfo] = None

    @property
    def is_leaf(self) -> bool:
        return not self.edges

    def walk(self) -> Iterator["KpiNode"]:
        """Yield this node and every descendant, pre-order, once per path."""
        yield self
        for edge in self.edges:
            yield from edge.target.walk()


class KpiEdge(DomainModel):
    """Weighted edge from a parent node to one of its inputs."""

    target: KpiNode
    weight: float = Field(ge=0.0, allow_inf_nan=False)


KpiNode.model_rebuild()


class KpiHierarchy(DomainModel):
    """Versioned hierarchy definition."""

    root: KpiNode
    schema_version: str = LATEST_SCHEMA_VERSION

    @field_validator("schema_version")
    @classmethod
    def _check_schema_version(cls, v: str) -> str:
        if v not in SCHEMA_VERSIONS:
            raise ValueError(
                f"Unsupported schema version {v!r}, expected one of {list(SCHEMA_VERSIONS)}"
            )
        return v

    @classmethod
    def create(cls, root: KpiNode) -> "KpiHierarchy":
        """Wrap a root node into a hierarchy stamped with the latest schema version."""
        return cls(root=root, schema_version=LATEST_SCHEMA_VERSION)
