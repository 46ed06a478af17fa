"""Identity strategy for leaf nodes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence

from healthscore.domain.models.hierarchy import StrategyId
from healthscore.domain.models.outcome import Error, Outcome, success
from healthscore.services.strategies.base import ChildContribution, KpiCalculationStrategy

if TYPE_CHECKING:
    from healthscore.services.binding import BoundNode


class RawValueStrategy(KpiCalculationStrategy):
    """Surfaces the measurement bound to a leaf.

    Child contributions are ignored; a leaf has none. The measured score is
    clamped into [0, 100].
    """

    strategy_id = StrategyId.RAW_VALUE_STRATEGY
    description = "Use the raw measurement bound to the leaf"

    def calculate(
        self,
        contributions: Sequence[ChildContribution],
        strict: bool = False,
        *,
        node: Optional[BoundNode] = None,
    ) -> Outcome:
        if node is None:
            return Error(message="raw value strategy needs a bound leaf")

        if node.measurement is None:
            return Error(message=f"missing value for {node.type_id}")

        return success(node.measurement.score)
