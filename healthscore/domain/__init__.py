"""Domain layer: hierarchy, measurement and result models."""
