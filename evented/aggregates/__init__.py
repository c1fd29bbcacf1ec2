"""Aggregate lookup, construction, locking and persistence."""

from .repository import AggregateFactory, AggregateRepository

__all__ = [
    "AggregateFactory",
    "AggregateRepository",
]
