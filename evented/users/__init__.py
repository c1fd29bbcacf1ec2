"""User accounts managed through events."""

from .events import Created, Destroyed, UserEvent
from .models import User, UserEventRecord

__all__ = [
    "Created",
    "Destroyed",
    "User",
    "UserEvent",
    "UserEventRecord",
]
