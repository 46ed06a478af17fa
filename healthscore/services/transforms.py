"""Raw-value transforms for leaves that need more than the identity strategy.

Some measurements are not scores but magnitudes (e.g. how many versions a
dependency lags behind). A transformer maps such a magnitude onto [0, 100]
using the thresholds of the leaf. Transformers are looked up by the leaf's
type id, independently of its strategy, and only for leaves.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, Optional, Tuple

from healthscore.domain.models.measurement import KpiType
from healthscore.domain.models.outcome import MAX_SCORE, MIN_SCORE, Error, Outcome, Success
from healthscore.services.binding import BoundNode


class RawValueTransformer(ABC):
    """Abstract base for leaf transforms, auto-registered by type id.

    Subclasses list the type ids they handle:

        class MyTransformer(RawValueTransformer):
            type_ids = ("MY_TYPE",)

            def transform(self, node):
                ...
    """

    type_ids: ClassVar[Tuple[str, ...]] = ()

    _registry: ClassVar[Dict[str, type[RawValueTransformer]]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        for type_id in cls.type_ids:
            cls._registry[type_id] = cls

    @classmethod
    def get_registered_type_ids(cls) -> Tuple[str, ...]:
        return tuple(cls._registry)

    @abstractmethod
    def transform(self, node: BoundNode) -> Outcome:
        """Compute the outcome of a bound leaf."""


class TechnicalLagTransformer(RawValueTransformer):
    """Scores technical lag against the leaf's largest threshold t.

    A lag up to t scores 100, a lag above 2t scores 0, and anything in
    between falls off linearly. Half points round up.
    """

    type_ids = (
        KpiType.TECHNICAL_LAG_DEV_DIRECT_COMPONENT.value,
        KpiType.TECHNICAL_LAG_PROD_DIRECT_COMPONENT.value,
    )

    def transform(self, node: BoundNode) -> Outcome:
        thresholds = node.definition.thresholds
        if not thresholds:
            return Error(message=f"no thresholds configured for {node.type_id}")

        if node.measurement is None:
            return Error(message=f"missing value for {node.type_id}")

        threshold = max(t.value for t in thresholds)
        return score_technical_lag(node.measurement.score, threshold)


def score_technical_lag(lag: int, threshold: int) -> Outcome:
    """Map a lag magnitude onto [0, 100] given the threshold.

    Args:
        lag: Non-negative drift magnitude
        threshold: Positive threshold; lags up to it are fully healthy

    Returns:
        Success with the interpolated score, Error for a negative lag or
        a non-positive threshold
    """
    if lag < 0:
        return Error(message=f"technical lag must not be negative, got {lag}")
    if threshold <= 0:
        return Error(message=f"technical lag threshold must be positive, got {threshold}")

    if lag <= threshold:
        return Success(score=MAX_SCORE)
    if lag > 2 * threshold:
        return Success(score=MIN_SCORE)

    ratio = (lag - threshold) / threshold
    return Success(score=int(math.floor((1 - ratio) * 100 + 0.5)))


def get_transformer(type_id: str) -> Optional[RawValueTransformer]:
    """Return the transformer registered for a type id, or None."""
    transformer_class = RawValueTransformer._registry.get(type_id)
    if transformer_class is None:
        return None
    return transformer_class()
