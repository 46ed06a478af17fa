"""Base classes for KPI calculation strategies with auto-registration.

Every hierarchy node names the strategy that computes its outcome. The
identity strategy surfaces a leaf's raw measurement; aggregation strategies
combine the outcomes of a node's children using the edge weights.

Core classes:
- KpiCalculationStrategy: Abstract base, auto-registered by strategy_id
- AggregationStrategy: Shared strict/lenient handling and weight normalization
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar, List, Optional, Sequence

from healthscore.core.exceptions import UnknownStrategyError
from healthscore.domain.models.hierarchy import StrategyId
from healthscore.domain.models.outcome import Error, Outcome, Success

if TYPE_CHECKING:
    from healthscore.services.binding import BoundNode


@dataclass(frozen=True)
class ChildContribution:
    """Planned edge weight and already computed outcome of one child.

    raw_score is the unclamped measurement of a raw-value leaf child; it is
    None for aggregated or transformed children.
    """

    weight: float
    outcome: Outcome
    raw_score: Optional[float] = None


@dataclass(frozen=True)
class WeightedScore:
    """Successful child with its weight normalized over the live children.

    magnitude is the unclamped value behind score (the raw measurement of a
    leaf child). Ratios are taken over magnitudes, so that counts above 100
    keep their proportion.
    """

    score: int
    weight: float
    magnitude: float


class KpiCalculationStrategy(ABC):
    """Abstract base for KPI calculation strategies.

    Subclasses defining strategy_id register themselves on import:

        class MyStrategy(AggregationStrategy):
            strategy_id = StrategyId.MY_STRATEGY

            def aggregate(self, children):
                ...

    Strategies are stateless; get() hands out a fresh instance.
    """

    strategy_id: ClassVar[StrategyId]
    description: ClassVar[str] = ""

    _registry: ClassVar[dict[StrategyId, type[KpiCalculationStrategy]]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)

        # Only register concrete strategies (skip intermediate bases)
        if "strategy_id" in cls.__dict__:
            cls._registry[cls.strategy_id] = cls

    @classmethod
    def get_registered_strategies(cls) -> dict[StrategyId, type[KpiCalculationStrategy]]:
        """Get all registered strategy classes keyed by id."""
        return cls._registry.copy()

    @classmethod
    def get(cls, strategy_id: StrategyId | str) -> KpiCalculationStrategy:
        """Resolve a strategy by id.

        Args:
            strategy_id: StrategyId member or its string value

        Returns:
            The registered strategy instance

        Raises:
            UnknownStrategyError: If the id is not a registered strategy
        """
        try:
            key = StrategyId(strategy_id)
        except ValueError:
            raise UnknownStrategyError(str(strategy_id)) from None

        strategy_class = cls._registry.get(key)
        if strategy_class is None:
            raise UnknownStrategyError(key.value)
        return strategy_class()

    @abstractmethod
    def calculate(
        self,
        contributions: Sequence[ChildContribution],
        strict: bool = False,
        *,
        node: Optional[BoundNode] = None,
    ) -> Outcome:
        """Compute a node outcome.

        Args:
            contributions: Children of the node in edge order
            strict: Fail on any erroring child instead of leaving it out
            node: The node being evaluated (needed by the identity strategy)

        Returns:
            Success with a score in [0, 100] or Error
        """

    def effective_weights(
        self, contributions: Sequence[ChildContribution], outcome: Outcome
    ) -> List[float]:
        """Weight share each child actually had in the computed outcome."""
        return [c.weight for c in contributions]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.strategy_id.value})"


class AggregationStrategy(KpiCalculationStrategy):
    """Base for strategies combining child outcomes.

    Handles the parts every aggregation shares:
    - a node without children cannot be aggregated
    - strict mode returns the first child error
    - lenient mode drops erroring children and renormalizes the weights
    - zero-weight children are left out; a zero or overflowing total weight
      is an error
    - the aggregated score is clamped to [0, 100]

    Subclasses implement aggregate() over the remaining children, whose
    weights sum to 1.
    """

    def calculate(
        self,
        contributions: Sequence[ChildContribution],
        strict: bool = False,
        *,
        node: Optional[BoundNode] = None,
    ) -> Outcome:
        if not contributions:
            return Error(message="no child results to aggregate")

        if strict:
            for contribution in contributions:
                if isinstance(contribution.outcome, Error):
                    return Error(message=contribution.outcome.message)

        successful = [c for c in contributions if isinstance(c.outcome, Success)]
        if not successful:
            return Error(message="all child results are errors")

        live = [c for c in successful if c.weight > 0]
        total_weight = sum(c.weight for c in live)
        if not math.isfinite(total_weight):
            return Error(message="total weight of child results is not finite")
        if total_weight <= 0:
            return Error(message="total weight of child results is zero")

        children = [
            WeightedScore(
                score=c.outcome.score,
                weight=c.weight / total_weight,
                magnitude=c.outcome.score if c.raw_score is None else c.raw_score,
            )
            for c in live
        ]
        return self.aggregate(children)

    @abstractmethod
    def aggregate(self, children: List[WeightedScore]) -> Outcome:
        """Combine the live children (non-empty, weights sum to 1).

        Implementations build their Success through outcome.success(), which
        clamps the score to [0, 100].
        """

    def effective_weights(
        self, contributions: Sequence[ChildContribution], outcome: Outcome
    ) -> List[float]:
        """Planned weights rescaled over the children that took part.

        Children left out (errors, zero weight) get 0. The remaining ones are
        scaled so that together they keep the planned total. Every child gets
        0 when the node itself errored.
        """
        if isinstance(outcome, Error):
            return [0.0] * len(contributions)

        planned_total = sum(c.weight for c in contributions)
        live_total = sum(
            c.weight
            for c in contributions
            if isinstance(c.outcome, Success) and c.weight > 0
        )
        if live_total <= 0:
            return [0.0] * len(contributions)

        return [
            c.weight / live_total * planned_total
            if isinstance(c.outcome, Success) and c.weight > 0
            else 0.0
            for c in contributions
        ]


def truncate_score(value: float) -> int:
    """Drop the fractional part of a computed score.

    Rounds to 9 decimals first so float noise (79.99999999) does not cost a point.
    """
    return int(round(value, 9))
