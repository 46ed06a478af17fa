"""
Shared test fixtures.

Small hand-built hierarchies and a deterministic id factory.
"""

import itertools

import pytest

from healthscore.core.logging import configure_logging
from healthscore.domain.models import (
    KpiEdge,
    KpiHierarchy,
    KpiNode,
    RawMeasurement,
    StrategyId,
)


@pytest.fixture(scope="session", autouse=True)
def _logging():
    """Route logs to stderr only, so stdout stays clean for output assertions."""
    configure_logging(log_to_file=False)


@pytest.fixture
def sequential_ids():
    """Id factory yielding node-1, node-2, ..."""
    counter = itertools.count(1)
    return lambda: f"node-{next(counter)}"


@pytest.fixture
def leaf_a():
    return KpiNode(type_id="A", strategy=StrategyId.RAW_VALUE_STRATEGY)


@pytest.fixture
def leaf_b():
    return KpiNode(type_id="B", strategy=StrategyId.RAW_VALUE_STRATEGY)


@pytest.fixture
def simple_hierarchy(leaf_a, leaf_b):
    """ROOT = weighted average of A (0.5) and B (0.5)."""
    root = KpiNode(
        type_id="ROOT",
        strategy=StrategyId.WEIGHTED_AVERAGE_STRATEGY,
        edges=(
            KpiEdge(target=leaf_a, weight=0.5),
            KpiEdge(target=leaf_b, weight=0.5),
        ),
    )
    return KpiHierarchy.create(root)


@pytest.fixture
def simple_measurements():
    return [
        RawMeasurement(type_id="A", score=80, id="m-a", origin_id="scan-1"),
        RawMeasurement(type_id="B", score=60, id="m-b"),
    ]
