"""Structural validation of hierarchy definitions.

Runs before evaluation so that a malformed hierarchy aborts the call
instead of producing a result. Checks:
- the schema version is supported
- the definition graph is acyclic (shared subtrees are fine)
- raw-value nodes have no edges and internal nodes do not use the
  raw-value strategy
- in strict mode, aggregation nodes have at least one edge
"""

from typing import Dict, List, Optional

import networkx as nx
import structlog

from healthscore.core.exceptions import (
    HierarchyValidationError,
    UnsupportedSchemaVersionError,
)
from healthscore.domain.models.hierarchy import (
    SCHEMA_VERSIONS,
    KpiHierarchy,
    KpiNode,
    StrategyId,
)

logger = structlog.get_logger(__name__)


def build_definition_graph(root: KpiNode) -> nx.DiGraph:
    """Directed graph of the definition, one vertex per distinct node object.

    Vertices are keyed by object identity so that a subtree shared between
    parents appears once. Each vertex carries the node under "node".
    """
    graph = nx.DiGraph()
    graph.add_node(id(root), node=root)

    stack = [root]
    seen = {id(root)}
    while stack:
        node = stack.pop()
        for edge in node.edges:
            target = edge.target
            graph.add_node(id(target), node=target)
            graph.add_edge(id(node), id(target))
            if id(target) not in seen:
                seen.add(id(target))
                stack.append(target)

    return graph


def find_problems(
    hierarchy: KpiHierarchy,
    strict: bool = False,
    graph: Optional[nx.DiGraph] = None,
) -> List[str]:
    """Collect every structural problem of a hierarchy.

    Args:
        hierarchy: Hierarchy definition to check
        strict: Also reject aggregation nodes without edges
        graph: Definition graph of the hierarchy, built when not given

    Returns:
        Human readable problem descriptions, empty if the hierarchy is valid
    """
    problems: List[str] = []

    if graph is None:
        graph = build_definition_graph(hierarchy.root)
    if not nx.is_directed_acyclic_graph(graph):
        cycle = nx.find_cycle(graph)
        path = " -> ".join(graph.nodes[u]["node"].type_id for u, _ in cycle)
        problems.append(f"cycle detected: {path}")

    nodes: Dict[int, KpiNode] = {
        key: data["node"] for key, data in graph.nodes(data=True)
    }
    for node in nodes.values():
        if node.strategy == StrategyId.RAW_VALUE_STRATEGY and node.edges:
            problems.append(
                f"{node.type_id}: raw value node must not have edges "
                f"(has {len(node.edges)})"
            )
        elif node.strategy != StrategyId.RAW_VALUE_STRATEGY and not node.edges and strict:
            problems.append(
                f"{node.type_id}: aggregation strategy {node.strategy.value} "
                "needs at least one edge"
            )

    return problems


def validate_hierarchy(hierarchy: KpiHierarchy, strict: bool = False) -> nx.DiGraph:
    """Raise if the hierarchy cannot be evaluated.

    Returns:
        Definition graph of the valid hierarchy (see build_definition_graph)

    Raises:
        UnsupportedSchemaVersionError: If the schema version is not supported
        HierarchyValidationError: If the structure is invalid
    """
    if hierarchy.schema_version not in SCHEMA_VERSIONS:
        raise UnsupportedSchemaVersionError(
            f"Unsupported schema version {hierarchy.schema_version!r}, "
            f"expected one of {list(SCHEMA_VERSIONS)}"
        )

    graph = build_definition_graph(hierarchy.root)
    problems = find_problems(hierarchy, strict=strict, graph=graph)
    if problems:
        logger.warning(
            "hierarchy_validation_failed",
            root_type_id=hierarchy.root.type_id,
            problems=problems,
        )
        raise HierarchyValidationError(
            f"Invalid KPI hierarchy: {'; '.join(problems)}",
            problems=problems,
        )

    return graph


def is_valid(hierarchy: KpiHierarchy, strict: bool = False) -> bool:
    """Boolean form of validate_hierarchy."""
    try:
        validate_hierarchy(hierarchy, strict=strict)
    except (HierarchyValidationError, UnsupportedSchemaVersionError):
        return False
    return True
