"""Domain models for raw leaf-level measurements."""

from enum import Enum
from typing import Optional

from healthscore.domain.models.base import DomainModel


class KpiType(str, Enum):
    """Known KPI type identifiers.

    Hierarchies may use any string as type id; these are the ones the
    default hierarchy and the raw-value transforms know about.
    """

    ROOT = "ROOT"

    # Aggregated
    PROCESS_TRANSPARENCY = "PROCESS_TRANSPARENCY"
    PROCESS_COMPLIANCE = "PROCESS_COMPLIANCE"
    SECURITY = "SECURITY"
    INTERNAL_QUALITY = "INTERNAL_QUALITY"
    EXTERNAL_QUALITY = "EXTERNAL_QUALITY"
    DOCUMENTATION = "DOCUMENTATION"
    SIGNED_COMMITS_RATIO = "SIGNED_COMMITS_RATIO"
    MAXIMAL_VULNERABILITY = "MAXIMAL_VULNERABILITY"
    MAXIMAL_CONTAINER_VULNERABILITY = "MAXIMAL_CONTAINER_VULNERABILITY"

    # Raw values
    CHECKED_IN_BINARIES = "CHECKED_IN_BINARIES"
    COMMENTS_IN_CODE = "COMMENTS_IN_CODE"
    NUMBER_OF_COMMITS = "NUMBER_OF_COMMITS"
    NUMBER_OF_SIGNED_COMMITS = "NUMBER_OF_SIGNED_COMMITS"
    IS_DEFAULT_BRANCH_PROTECTED = "IS_DEFAULT_BRANCH_PROTECTED"
    SECRETS = "SECRETS"
    SAST_USAGE = "SAST_USAGE"
    DOCUMENTATION_INFRASTRUCTURE = "DOCUMENTATION_INFRASTRUCTURE"
    CODE_VULNERABILITY_SCORE = "CODE_VULNERABILITY_SCORE"
    CONTAINER_VULNERABILITY_SCORE = "CONTAINER_VULNERABILITY_SCORE"
    TECHNICAL_LAG_DEV_DIRECT_COMPONENT = "TECHNICAL_LAG_DEV_DIRECT_COMPONENT"
    TECHNICAL_LAG_PROD_DIRECT_COMPONENT = "TECHNICAL_LAG_PROD_DIRECT_COMPONENT"


class RawMeasurement(DomainModel):
    """A single leaf-level score produced by a tool adapter.

    score is conventionally 0-100 but is not clamped here; for technical lag
    it is a drift magnitude that the transform layer maps onto 0-100.
    id is optional: missing ids are generated during binding.
    """

    type_id: str
    score: int
    id: Optional[str] = None
    origin_id: Optional[str] = None
