"""Exceptions raised by the event runtime."""

from typing import Any


class EventedError(Exception):
    """Base class for every error raised by evented."""

    pass


class ConfigurationError(EventedError):
    """Raised when events, aggregates or event logs are wired incorrectly.

    Configuration errors are detected at registration time (an event
    variant without an aggregate kind, an aggregate kind without an event
    log, duplicate tags) or when an unknown event type tag is requested.
    They indicate a programming mistake rather than a runtime condition.
    """

    pass


class UnimplementedMutationError(EventedError, NotImplementedError):
    """Raised when an event variant does not define a mutation rule."""

    def __init__(self, event_type: type):
        super().__init__(
            f"Event {event_type.__name__} does not implement apply(aggregate)"
        )
        self.event_type = event_type


class NotFoundError(EventedError):
    """Raised when a target identifier references no existing aggregate.

    Attributes:
        resource: Name of the aggregate type that was looked up.
        identifier: The identifier that could not be found.
    """

    def __init__(self, resource: str, identifier: Any = None):
        message = f"{resource} not found"
        if identifier is not None:
            message = f"{resource} '{identifier}' not found"
        super().__init__(message)
        self.resource = resource
        self.identifier = identifier


class ValidationError(EventedError):
    """Raised when an aggregate or payload fails its field constraints.

    Attributes:
        errors: Field-level failures, each a dict with at least a
            ``field`` and a ``message`` key.
    """

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.errors: list[dict[str, Any]] = errors or []


class PersistenceError(EventedError):
    """Raised when the underlying storage fails to persist a change."""

    pass


class AppendOnlyError(PersistenceError):
    """Raised when a persisted event record would be updated or deleted."""

    pass
