"""Event persistence infrastructure.

This package provides:
- PayloadCodec: Maps an event variant's fields to/from its stored payload
- EventTypeRegistry: Resolves stored type tags to event variants
- EventRecord: Base class for per-aggregate append-only event log tables
- EventStore: Appends and reads event records
"""

from .codec import PayloadCodec
from .record import EventRecord, log_for
from .registry import EventTypeRegistry
from .store import EventStore

__all__ = [
    "EventRecord",
    "EventStore",
    "EventTypeRegistry",
    "PayloadCodec",
    "log_for",
]
