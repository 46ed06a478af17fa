"""Strategies that use the normalized edge weights."""

from typing import List

from healthscore.domain.models.hierarchy import StrategyId
from healthscore.domain.models.outcome import Error, Outcome, success
from healthscore.services.strategies.base import (
    AggregationStrategy,
    WeightedScore,
    truncate_score,
)


class WeightedAverageStrategy(AggregationStrategy):
    """Weighted mean of the child scores, truncated to an integer."""

    strategy_id = StrategyId.WEIGHTED_AVERAGE_STRATEGY
    description = "Weighted mean of the child scores"

    def aggregate(self, children: List[WeightedScore]) -> Outcome:
        return success(truncate_score(sum(c.score * c.weight for c in children)))


class WeightedRatioStrategy(AggregationStrategy):
    """Ratio of the smaller to the larger weighted child score, in percent.

    Used for "x out of y" KPIs such as signed commits over all commits.
    Requires exactly two children; the order of the edges does not matter.
    Raw-value leaves enter with their unclamped measurement, so counts above
    100 keep their proportion.
    """

    strategy_id = StrategyId.WEIGHTED_RATIO_STRATEGY
    description = "Smaller weighted child score relative to the larger one"

    def aggregate(self, children: List[WeightedScore]) -> Outcome:
        if len(children) != 2:
            return Error(
                message=f"weighted ratio needs exactly two child results, got {len(children)}"
            )

        weighted = sorted(c.magnitude * c.weight for c in children)
        smaller, larger = weighted
        if larger <= 0:
            return Error(message="weighted ratio is undefined, both child scores are zero")

        return success(truncate_score(smaller / larger * 100))


class WeightedMinimumStrategy(AggregationStrategy):
    """Score of the child with the smallest weighted score.

    Ties go to the first child in edge order.
    """

    strategy_id = StrategyId.WEIGHTED_MINIMUM_STRATEGY
    description = "Child with the lowest weighted score"

    def aggregate(self, children: List[WeightedScore]) -> Outcome:
        selected = min(children, key=lambda c: c.score * c.weight)
        return success(selected.score)


class WeightedMaximumStrategy(AggregationStrategy):
    """Score of the child with the largest weighted score.

    Ties go to the first child in edge order.
    """

    strategy_id = StrategyId.WEIGHTED_MAXIMUM_STRATEGY
    description = "Child with the highest weighted score"

    def aggregate(self, children: List[WeightedScore]) -> Outcome:
        selected = max(children, key=lambda c: c.score * c.weight)
        return success(selected.score)
