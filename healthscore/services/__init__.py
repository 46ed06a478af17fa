"""Health score evaluation services."""
