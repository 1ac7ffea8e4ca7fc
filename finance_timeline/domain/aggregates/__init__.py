"""Domain aggregates package."""

from .change import ChangeAggregate

__all__ = ["ChangeAggregate"]
