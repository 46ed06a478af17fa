"""Tests for exception hierarchy."""

import pytest


def test_exception_hierarchy():
    """All exceptions inherit from HealthScoreError."""
    from healthscore.core.exceptions import (
        HealthScoreError,
        ConfigurationError,
        UnknownStrategyError,
        UnsupportedSchemaVersionError,
        HierarchyValidationError,
        HierarchyLoadError,
    )

    assert issubclass(ConfigurationError, HealthScoreError)
    assert issubclass(UnknownStrategyError, ConfigurationError)
    assert issubclass(UnsupportedSchemaVersionError, ConfigurationError)
    assert issubclass(HierarchyValidationError, ConfigurationError)
    assert issubclass(HierarchyLoadError, ConfigurationError)


def test_exceptions_can_be_raised():
    """Exceptions can be raised and caught."""
    from healthscore.core.exceptions import HierarchyLoadError

    with pytest.raises(HierarchyLoadError):
        raise HierarchyLoadError("File not found: missing.yaml")


def test_unknown_strategy_error_message():
    from healthscore.core.exceptions import UnknownStrategyError

    exc = UnknownStrategyError("MEDIAN_STRATEGY")

    assert exc.strategy_id == "MEDIAN_STRATEGY"
    assert exc.message == "Unknown KPI calculation strategy: MEDIAN_STRATEGY"
    assert str(exc) == exc.message


def test_validation_error_keeps_problems():
    from healthscore.core.exceptions import HierarchyValidationError

    exc = HierarchyValidationError("Invalid KPI hierarchy", problems=["a", "b"])
    assert exc.problems == ["a", "b"]

    # Without explicit problems the message is the only problem
    assert HierarchyValidationError("broken").problems == ["broken"]
