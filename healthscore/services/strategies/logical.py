"""Boolean strategies.

A child counts as true when it scores the maximum (100). The node scores
100 when the condition holds and 0 otherwise.
"""

from typing import List

from healthscore.domain.models.hierarchy import StrategyId
from healthscore.domain.models.outcome import MAX_SCORE, MIN_SCORE, Error, Outcome, success
from healthscore.services.strategies.base import AggregationStrategy, WeightedScore


def _is_true(child: WeightedScore) -> bool:
    return child.score == MAX_SCORE


def _as_score(value: bool) -> Outcome:
    return success(MAX_SCORE if value else MIN_SCORE)


class AndStrategy(AggregationStrategy):
    strategy_id = StrategyId.AND_STRATEGY
    description = "100 if every child scores 100"

    def aggregate(self, children: List[WeightedScore]) -> Outcome:
        return _as_score(all(_is_true(c) for c in children))


class OrStrategy(AggregationStrategy):
    strategy_id = StrategyId.OR_STRATEGY
    description = "100 if any child scores 100"

    def aggregate(self, children: List[WeightedScore]) -> Outcome:
        return _as_score(any(_is_true(c) for c in children))


class XorStrategy(AggregationStrategy):
    """Exclusive or over exactly two children."""

    strategy_id = StrategyId.XOR_STRATEGY
    description = "100 if exactly one of two children scores 100"

    def aggregate(self, children: List[WeightedScore]) -> Outcome:
        if len(children) != 2:
            return Error(
                message=f"xor needs exactly two child results, got {len(children)}"
            )
        first, second = children
        return _as_score(_is_true(first) != _is_true(second))
