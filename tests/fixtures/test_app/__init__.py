"""Test application package."""

from .aggregates import (
    Annotated,
    Exploded,
    Incremented,
    Orphan,
    OrphanAdopted,
    Started,
    Tally,
    TallyEvent,
    TallyEventRecord,
    Unbound,
)

__all__ = [
    "Annotated",
    "Exploded",
    "Incremented",
    "Orphan",
    "OrphanAdopted",
    "Started",
    "Tally",
    "TallyEvent",
    "TallyEventRecord",
    "Unbound",
]
