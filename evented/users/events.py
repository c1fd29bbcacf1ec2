"""Events targeting the user aggregate."""

from ..domain import Event
from .models import User


class UserEvent(Event):
    """Binds user events to the ``User`` aggregate and its event log."""

    aggregate_type = User


class Created(UserEvent):
    """A user signed up."""

    name: str | None = None
    email: str | None = None
    password: str | None = None

    def apply(self, user: User) -> User:
        user.name = self.name
        user.email = self.email
        user.password_digest = self.password
        return user


class Destroyed(UserEvent):
    """A user was deleted. The row is kept and flagged as deleted."""

    id: int | None = None

    def apply(self, user: User) -> User:
        user.deleted = True
        return user
