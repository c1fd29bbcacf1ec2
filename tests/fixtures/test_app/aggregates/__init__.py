from .orphan import Orphan, OrphanAdopted, Unbound
from .tally import (
    Annotated,
    Exploded,
    Incremented,
    Started,
    Tally,
    TallyEvent,
    TallyEventRecord,
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
