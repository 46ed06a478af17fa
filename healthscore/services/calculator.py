"""Evaluation of a KPI hierarchy against a set of raw measurements.

Flow of one call:
1. validate the hierarchy and resolve every strategy it names
   (configuration problems raise here, before any node is evaluated)
2. bind the measurements onto the hierarchy
3. evaluate the bound tree children-first, recording each node's outcome
   exactly once in a per-call map keyed by bound node index
4. assemble the immutable result hierarchy from the bound tree and the map

Every call is a full, stateless re-evaluation; nothing is cached between
calls.
"""

import asyncio
import time
from typing import Dict, Iterable, List, Optional

import structlog

from healthscore.domain.models.hierarchy import KpiHierarchy, KpiNode, StrategyId
from healthscore.domain.models.measurement import RawMeasurement
from healthscore.domain.models.outcome import Error, Outcome, Success
from healthscore.domain.models.result import (
    KpiResultEdge,
    KpiResultHierarchy,
    KpiResultNode,
)
from healthscore.services.binding import BoundNode, IdFactory, bind
from healthscore.services.strategies import (
    ChildContribution,
    KpiCalculationStrategy,
    get_strategy,
)
from healthscore.services.transforms import get_transformer
from healthscore.services.validation import validate_hierarchy

logger = structlog.get_logger(__name__)

Strategies = Dict[StrategyId, KpiCalculationStrategy]
Outcomes = Dict[int, Outcome]


def calculate_kpis(
    hierarchy: KpiHierarchy,
    measurements: Iterable[RawMeasurement],
    strict: bool = False,
    id_factory: Optional[IdFactory] = None,
) -> KpiResultHierarchy:
    """Evaluate a hierarchy against raw measurements.

    Args:
        hierarchy: Hierarchy definition to evaluate
        measurements: Raw leaf measurements; the first one per type id is used
        strict: Any erroring child makes its parent an error
            (default: erroring children are left out and weights renormalized)
        id_factory: Generates ids for nodes without a measurement id
            (default: uuid4 strings)

    Returns:
        Result hierarchy mirroring the definition node for node

    Raises:
        UnknownStrategyError: If a node names an unregistered strategy
        HierarchyValidationError: If the hierarchy is structurally invalid
        UnsupportedSchemaVersionError: If the schema version is not supported
    """
    started = time.perf_counter()
    measurements = list(measurements)
    strategies = prepare(hierarchy, strict)

    logger.info(
        "kpi_calculation_started",
        root_type_id=hierarchy.root.type_id,
        measurements=len(measurements),
        strict=strict,
    )

    root = bind(hierarchy.root, measurements, id_factory)
    outcomes: Outcomes = {}
    for node in root.post_order():
        _record(outcomes, node, evaluate_node(node, outcomes, strategies, strict))

    return _finish(root, outcomes, strategies, started)


async def calculate_kpis_async(
    hierarchy: KpiHierarchy,
    measurements: Iterable[RawMeasurement],
    strict: bool = False,
    id_factory: Optional[IdFactory] = None,
) -> KpiResultHierarchy:
    """Async variant of calculate_kpis.

    Sibling subtrees are evaluated concurrently; a parent is evaluated once
    all of its children have finished. Outcomes are identical to the
    synchronous call.
    """
    started = time.perf_counter()
    measurements = list(measurements)
    strategies = prepare(hierarchy, strict)

    logger.info(
        "kpi_calculation_started",
        root_type_id=hierarchy.root.type_id,
        measurements=len(measurements),
        strict=strict,
        concurrent=True,
    )

    root = bind(hierarchy.root, measurements, id_factory)
    outcomes: Outcomes = {}
    await _evaluate_subtree(root, outcomes, strategies, strict)

    return _finish(root, outcomes, strategies, started)


def prepare(hierarchy: KpiHierarchy, strict: bool = False) -> Strategies:
    """Validate the hierarchy and resolve every strategy it uses.

    Raises:
        UnknownStrategyError: If a node names an unregistered strategy
        HierarchyValidationError: If the hierarchy is structurally invalid
        UnsupportedSchemaVersionError: If the schema version is not supported
    """
    graph = validate_hierarchy(hierarchy, strict=strict)
    strategies: Strategies = {}
    for _, node in graph.nodes(data="node"):
        if node.strategy not in strategies:
            strategies[node.strategy] = get_strategy(node.strategy)
    return strategies


def evaluate_node(
    node: BoundNode,
    outcomes: Outcomes,
    strategies: Strategies,
    strict: bool = False,
) -> Outcome:
    """Compute the outcome of one bound node.

    All children of the node must already have an outcome in the map.
    Leaves with a registered transformer are transformed; every other node
    is computed by its strategy.
    """
    if node.is_leaf:
        transformer = get_transformer(node.type_id)
        if transformer is not None:
            return transformer.transform(node)

    strategy = strategies[node.definition.strategy]
    outcome = strategy.calculate(_contributions(node, outcomes), strict, node=node)

    # Identity errors already name the leaf type
    if isinstance(outcome, Error) and strategy.strategy_id != StrategyId.RAW_VALUE_STRATEGY:
        return Error(message=f"{node.type_id}: {outcome.message}")
    return outcome


async def _evaluate_subtree(
    node: BoundNode,
    outcomes: Outcomes,
    strategies: Strategies,
    strict: bool,
) -> None:
    if node.children:
        await asyncio.gather(
            *(
                _evaluate_subtree(edge.node, outcomes, strategies, strict)
                for edge in node.children
            )
        )
    _record(outcomes, node, evaluate_node(node, outcomes, strategies, strict))


def _contributions(node: BoundNode, outcomes: Outcomes) -> List[ChildContribution]:
    return [
        ChildContribution(
            weight=edge.weight,
            outcome=outcomes[edge.node.index],
            raw_score=_raw_score(edge.node),
        )
        for edge in node.children
    ]


def _raw_score(node: BoundNode) -> Optional[float]:
    """Unclamped measurement of a raw-value leaf, None for any other node."""
    if (
        not node.is_leaf
        or node.measurement is None
        or node.definition.strategy != StrategyId.RAW_VALUE_STRATEGY
        or get_transformer(node.type_id) is not None
    ):
        return None
    return float(node.measurement.score)


def _record(outcomes: Outcomes, node: BoundNode, outcome: Outcome) -> None:
    if node.index in outcomes:
        raise RuntimeError(f"Outcome of node {node.type_id} ({node.id}) already recorded")
    outcomes[node.index] = outcome


def _finish(
    root: BoundNode,
    outcomes: Outcomes,
    strategies: Strategies,
    started: float,
) -> KpiResultHierarchy:
    result = KpiResultHierarchy.create(assemble(root, outcomes, strategies))

    root_outcome = result.root.result
    logger.info(
        "kpi_calculation_completed",
        root_type_id=root.type_id,
        score=root_outcome.score if isinstance(root_outcome, Success) else None,
        nodes=len(outcomes),
        errors=sum(1 for o in outcomes.values() if isinstance(o, Error)),
        duration_ms=round((time.perf_counter() - started) * 1000, 2),
    )
    return result


def assemble(
    node: BoundNode,
    outcomes: Outcomes,
    strategies: Strategies,
) -> KpiResultNode:
    """Build the result node for a fully evaluated bound subtree."""
    outcome = outcomes[node.index]

    edges = ()
    if node.children:
        contributions = _contributions(node, outcomes)
        actual = strategies[node.definition.strategy].effective_weights(
            contributions, outcome
        )
        edges = tuple(
            KpiResultEdge(
                target=assemble(edge.node, outcomes, strategies),
                planned_weight=edge.weight,
                actual_weight=weight,
            )
            for edge, weight in zip(node.children, actual)
        )

    definition: KpiNode = node.definition
    return KpiResultNode(
        type_id=definition.type_id,
        strategy=definition.strategy,
        result=outcome,
        id=node.id,
        edges=edges,
        origin_id=node.origin_id,
        thresholds=definition.thresholds,
        display_name=definition.display_name,
        meta_info=definition.meta_info,
    )
