"""Project health score: KPI hierarchy evaluation engine."""

__version__ = "0.1.0"
