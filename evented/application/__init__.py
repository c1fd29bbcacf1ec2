"""Orchestration of event application."""

from .applier import AppliedEvent, ApplyState, EventApplier

__all__ = [
    "AppliedEvent",
    "ApplyState",
    "EventApplier",
]
