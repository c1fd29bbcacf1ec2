import contextvars
from dataclasses import dataclass, replace

from ulid import ULID


@dataclass(frozen=True)
class ExecutionContext:
    """Immutable context for tracing a request through event application.

    ExecutionContext carries the identifiers that tie together every log
    record produced while handling one logical operation, for example one
    HTTP request that applies an event.

    Attributes:
        correlation_id: Unique ID that traces an entire logical operation.
            Remains constant throughout the flow.
        causation_id: ID of what directly caused the current operation. At
            an entry point this is the correlation_id itself; after an event
            is persisted, follow-up work can use the event's identifier.

    Examples:
        Create a new context at a system entry point:

        >>> ctx = ExecutionContext.create()
        >>> set_context(ctx)

        Derive the context for work caused by a persisted event:

        >>> event_ctx = ctx.for_event("User:42")
        >>> # correlation_id stays the same
        >>> # causation_id becomes the event reference
    """

    correlation_id: ULID | None = None
    causation_id: ULID | str | None = None

    @classmethod
    def create(cls, correlation_id: ULID | None = None) -> "ExecutionContext":
        """Create a new context, typically at a system entry point.

        Args:
            correlation_id: Optional correlation ID. If not provided, a new
                ULID is generated. At entry points, causation_id is set to
                correlation_id (self-referencing).

        Returns:
            A new ExecutionContext instance.
        """
        if correlation_id is None:
            correlation_id = ULID()

        return cls(correlation_id=correlation_id, causation_id=correlation_id)

    def for_event(self, event_ref: str) -> "ExecutionContext":
        """Create a child context for work caused by a persisted event.

        Args:
            event_ref: Reference of the persisted event, e.g. ``"User:42"``.

        Returns:
            A new ExecutionContext with causation_id set to the reference.
        """
        return replace(self, causation_id=event_ref)


_context: contextvars.ContextVar[ExecutionContext | None] = contextvars.ContextVar(
    "execution_context", default=None
)


def get_context() -> ExecutionContext:
    """Get the current execution context.

    If no context has been set, returns an empty ExecutionContext with all
    fields None.
    """
    ctx = _context.get()
    if ctx is None:
        return ExecutionContext()
    return ctx


def set_context(context: ExecutionContext) -> None:
    _context.set(context)


def clear_context() -> None:
    _context.set(None)


def get_or_create_context() -> ExecutionContext:
    """Get the current context, or create and set a new one if not set.

    Returns:
        The current or newly created ExecutionContext.
    """
    ctx = _context.get()
    if ctx is None:
        ctx = ExecutionContext.create()
        set_context(ctx)
    return ctx
