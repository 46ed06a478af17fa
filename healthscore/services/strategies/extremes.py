"""Unweighted minimum / maximum strategies.

Weights only decide which children take part (zero-weight children are left
out by the base class); the selected score is the plain child score.
"""

from typing import List

from healthscore.domain.models.hierarchy import StrategyId
from healthscore.domain.models.outcome import Outcome, success
from healthscore.services.strategies.base import AggregationStrategy, WeightedScore


class MinimumStrategy(AggregationStrategy):
    strategy_id = StrategyId.MINIMUM_STRATEGY
    description = "Lowest child score"

    def aggregate(self, children: List[WeightedScore]) -> Outcome:
        return success(min(c.score for c in children))


class MaximumStrategy(AggregationStrategy):
    strategy_id = StrategyId.MAXIMUM_STRATEGY
    description = "Highest child score"

    def aggregate(self, children: List[WeightedScore]) -> Outcome:
        return success(max(c.score for c in children))
