"""Evented - event-sourced persistence for SQLAlchemy aggregates.

This module provides the public API: declare aggregates and event variants,
register the variants, and apply events atomically.
"""

from .aggregates import AggregateFactory, AggregateRepository
from .application import AppliedEvent, ApplyState, EventApplier
from .domain import (
    Aggregate,
    AppendOnlyError,
    Base,
    ConfigurationError,
    Event,
    EventedError,
    NotFoundError,
    PersistenceError,
    UnimplementedMutationError,
    ValidationError,
)
from .events import EventRecord, EventStore, EventTypeRegistry, PayloadCodec

__all__ = [
    # Application
    "AppliedEvent",
    "ApplyState",
    "EventApplier",
    # Domain primitives
    "Aggregate",
    "Base",
    "Event",
    # Persistence
    "AggregateFactory",
    "AggregateRepository",
    "EventRecord",
    "EventStore",
    "EventTypeRegistry",
    "PayloadCodec",
    # Errors
    "AppendOnlyError",
    "ConfigurationError",
    "EventedError",
    "NotFoundError",
    "PersistenceError",
    "UnimplementedMutationError",
    "ValidationError",
]
