"""Per-node evaluation outcome.

An outcome is either a Success carrying a score in [0, 100] or an Error
carrying a message. There is no partial state: an Error never has a score.
"""

from typing import Annotated, Literal, Union

from pydantic import Field

from healthscore.domain.models.base import DomainModel

MIN_SCORE = 0
MAX_SCORE = 100


class Success(DomainModel):
    """Node evaluated to a score."""

    type: Literal["success"] = "success"
    score: int = Field(ge=MIN_SCORE, le=MAX_SCORE)


class Error(DomainModel):
    """Node could not be evaluated."""

    type: Literal["error"] = "error"
    message: str


Outcome = Annotated[Union[Success, Error], Field(discriminator="type")]


def clamp_score(value: float) -> int:
    """Clamp a computed score into the valid [0, 100] range."""
    return int(max(MIN_SCORE, min(MAX_SCORE, value)))


def success(value: float) -> Success:
    """Build a Success outcome from a possibly out-of-range value."""
    return Success(score=clamp_score(value))
