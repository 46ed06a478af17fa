"""KPI calculation strategies.

Importing this package registers every built-in strategy. Resolve a
strategy through get_strategy(); unknown ids raise UnknownStrategyError.
"""

from typing import Union

from healthscore.domain.models.hierarchy import StrategyId
from healthscore.services.strategies.base import (
    AggregationStrategy,
    ChildContribution,
    KpiCalculationStrategy,
    WeightedScore,
)
from healthscore.services.strategies.raw_value import RawValueStrategy
from healthscore.services.strategies.weighted import (
    WeightedAverageStrategy,
    WeightedMaximumStrategy,
    WeightedMinimumStrategy,
    WeightedRatioStrategy,
)
from healthscore.services.strategies.extremes import MaximumStrategy, MinimumStrategy
from healthscore.services.strategies.logical import AndStrategy, OrStrategy, XorStrategy


def get_strategy(strategy_id: Union[StrategyId, str]) -> KpiCalculationStrategy:
    """Resolve a strategy by id (see KpiCalculationStrategy.get)."""
    return KpiCalculationStrategy.get(strategy_id)


__all__ = [
    "get_strategy",
    # Base classes
    "AggregationStrategy",
    "ChildContribution",
    "KpiCalculationStrategy",
    "WeightedScore",
    # Strategies
    "RawValueStrategy",
    "WeightedAverageStrategy",
    "WeightedRatioStrategy",
    "WeightedMinimumStrategy",
    "WeightedMaximumStrategy",
    "MinimumStrategy",
    "MaximumStrategy",
    "AndStrategy",
    "OrStrategy",
    "XorStrategy",
]
