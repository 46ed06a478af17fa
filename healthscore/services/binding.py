"""Binding of raw measurements onto a hierarchy definition.

Builds the runtime evaluation tree: one BoundNode per definition node per
path from the root. Leaves are paired with the measurement of the same type
id; internal nodes carry their bound children together with the edge
weights. Binding is a total structural operation and never fails on data:
leaves without a measurement are reported during evaluation.
"""

import itertools
import uuid
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, Iterator, Optional, Tuple

import structlog

from healthscore.domain.models.hierarchy import KpiNode
from healthscore.domain.models.measurement import RawMeasurement

logger = structlog.get_logger(__name__)

IdFactory = Callable[[], str]


def default_id_factory() -> str:
    """Random uuid4 ids for nodes without a measurement id."""
    return str(uuid.uuid4())


@dataclass(frozen=True)
class BoundEdge:
    """Edge of the bound tree: planned weight plus the bound child."""

    weight: float
    node: "BoundNode"


@dataclass(frozen=True)
class BoundNode:
    """Runtime node pairing a definition node with its inputs.

    index is unique within one bound tree and keys the node's outcome during
    evaluation. The same definition node reached through two parents yields
    two bound nodes with different indexes.
    """

    index: int
    definition: KpiNode
    id: str
    children: Tuple[BoundEdge, ...] = field(default_factory=tuple)
    measurement: Optional[RawMeasurement] = None
    origin_id: Optional[str] = None

    @property
    def type_id(self) -> str:
        return self.definition.type_id

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def post_order(self) -> Iterator["BoundNode"]:
        """Yield all nodes of the subtree, children before parents."""
        for edge in self.children:
            yield from edge.node.post_order()
        yield self


def index_measurements(
    measurements: Iterable[RawMeasurement],
) -> Dict[str, RawMeasurement]:
    """Map each type id to the first measurement carrying it.

    Later measurements with an already-seen type id are ignored and logged.

    Args:
        measurements: Raw measurements in the order supplied by the caller

    Returns:
        Dictionary type_id -> selected measurement
    """
    selected: Dict[str, RawMeasurement] = {}
    ignored: Dict[str, int] = {}

    for measurement in measurements:
        if measurement.type_id in selected:
            ignored[measurement.type_id] = ignored.get(measurement.type_id, 0) + 1
            continue
        selected[measurement.type_id] = measurement

    for type_id, count in ignored.items():
        logger.warning(
            "duplicate_measurements_ignored",
            type_id=type_id,
            ignored=count,
            kept_id=selected[type_id].id,
        )

    return selected


def bind(
    root: KpiNode,
    measurements: Iterable[RawMeasurement],
    id_factory: Optional[IdFactory] = None,
) -> BoundNode:
    """Build the bound evaluation tree for one evaluation call.

    Args:
        root: Root of the hierarchy definition
        measurements: Raw measurements to bind onto the leaves
        id_factory: Generates ids for nodes without a measurement id
            (default: uuid4 strings)

    Returns:
        Root of a freshly built bound tree
    """
    factory = id_factory or default_id_factory
    by_type = index_measurements(
        m if m.id else m.model_copy(update={"id": factory()}) for m in measurements
    )
    counter = itertools.count()

    bound = _bind_node(root, by_type, factory, counter)

    logger.debug(
        "hierarchy_bound",
        root_type_id=root.type_id,
        measurements=len(by_type),
    )
    return bound


def _bind_node(
    node: KpiNode,
    by_type: Dict[str, RawMeasurement],
    id_factory: IdFactory,
    counter: "itertools.count[int]",
) -> BoundNode:
    index = next(counter)

    if node.is_leaf:
        measurement = by_type.get(node.type_id)
        if measurement is None:
            return BoundNode(index=index, definition=node, id=id_factory())
        return BoundNode(
            index=index,
            definition=node,
            id=measurement.id,
            measurement=measurement,
            origin_id=measurement.origin_id,
        )

    children = tuple(
        BoundEdge(
            weight=edge.weight,
            node=_bind_node(edge.target, by_type, id_factory, counter),
        )
        for edge in node.edges
    )
    return BoundNode(
        index=index,
        definition=node,
        id=id_factory(),
        children=children,
    )
