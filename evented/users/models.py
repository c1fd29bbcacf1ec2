"""User aggregate and its event log."""

from typing import Any

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from ..domain import Aggregate
from ..events import EventRecord


class User(Aggregate):
    """A user account, changed only through user events."""

    __tablename__ = "users"

    name: Mapped[str | None] = mapped_column(String(255))
    email: Mapped[str | None] = mapped_column(String(255))
    password_digest: Mapped[str | None] = mapped_column(String(255))

    def validate(self) -> list[dict[str, Any]]:
        errors = []
        if not self.name:
            errors.append({"field": "name", "message": "can't be blank"})
        if not self.email:
            errors.append({"field": "email", "message": "can't be blank"})
        elif "@" not in self.email:
            errors.append({"field": "email", "message": "is invalid"})
        if not self.password_digest:
            errors.append({"field": "password_digest", "message": "can't be blank"})
        return errors

    def __repr__(self) -> str:
        return f"User(id={self.id!r}, name={self.name!r}, deleted={self.deleted!r})"


class UserEventRecord(EventRecord):
    __tablename__ = "user_events"
    __aggregate__ = User
