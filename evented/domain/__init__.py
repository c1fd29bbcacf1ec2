"""Domain primitives for event-sourced persistence.

This module contains the building blocks users extend to create their
domain models:

- Aggregate: Base class for entities mutated by events
- Event: Base class for event variants (payload struct + mutation rule)
- Base: Declarative base holding every aggregate and event log table
- The error taxonomy raised by the runtime
"""

from .aggregate import Aggregate, Base, utc_now
from .event import Event
from .exceptions import (
    AppendOnlyError,
    ConfigurationError,
    EventedError,
    NotFoundError,
    PersistenceError,
    UnimplementedMutationError,
    ValidationError,
)

__all__ = [
    "Aggregate",
    "Base",
    "Event",
    "utc_now",
    "AppendOnlyError",
    "ConfigurationError",
    "EventedError",
    "NotFoundError",
    "PersistenceError",
    "UnimplementedMutationError",
    "ValidationError",
]
