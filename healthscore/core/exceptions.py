"""
Custom exception hierarchy for the health score engine.

All application exceptions inherit from HealthScoreError.

Only configuration-class problems are raised as exceptions. Problems with
individual measurements never raise; they surface as Error outcomes on the
affected node of the result hierarchy.
"""

from typing import List, Optional


class HealthScoreError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(HealthScoreError):
    """Invalid or missing configuration."""

    pass


class UnknownStrategyError(ConfigurationError):
    """A hierarchy node references a strategy id that is not registered."""

    def __init__(self, strategy_id: str):
        self.strategy_id = strategy_id
        super().__init__(f"Unknown KPI calculation strategy: {strategy_id}")


class UnsupportedSchemaVersionError(ConfigurationError):
    """Hierarchy document declares a schema version outside the allowlist."""

    pass


class HierarchyValidationError(ConfigurationError):
    """Hierarchy definition violates a structural invariant.

    Raised for cycles, leaf strategies on internal nodes and (in strict mode)
    aggregation nodes without children.
    """

    def __init__(self, message: str, problems: Optional[List[str]] = None):
        self.problems = problems or [message]
        super().__init__(message)


class HierarchyLoadError(ConfigurationError):
    """Hierarchy or measurement document could not be read or parsed."""

    pass
