"""Transactional application of events to aggregates."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..aggregates import AggregateFactory, AggregateRepository
from ..context import ExecutionContext, get_context
from ..domain import Aggregate, Event, PersistenceError
from ..events import EventRecord, EventStore, EventTypeRegistry, PayloadCodec

LOGGER = logging.getLogger(__name__)

A = TypeVar("A", bound=Aggregate)


class ApplyState(str, Enum):
    """Progress of one event application attempt."""

    CONSTRUCTED = "constructed"
    AGGREGATE_RESOLVED = "aggregate_resolved"
    MUTATED = "mutated"
    AGGREGATE_PERSISTED = "aggregate_persisted"
    EVENT_PERSISTED = "event_persisted"
    FAILED = "failed"


@dataclass(frozen=True)
class AppliedEvent(Generic[A]):
    """Outcome of a successful event application.

    Attributes:
        record: The persisted event record.
        aggregate: The mutated, persisted aggregate.
        event: The event value that was applied.
        context: Execution context for follow-up work caused by the event.
            Keeps the correlation id and points causation at the record.
    """

    record: EventRecord
    aggregate: A
    event: Event
    context: ExecutionContext


class _Attempt:
    """Tracks and logs the state transitions of one application attempt."""

    __slots__ = ("state", "extra")

    def __init__(self, event: Event, aggregate_id: int | None):
        self.state = ApplyState.CONSTRUCTED
        # Payload values are never logged; they may hold credentials or PII.
        self.extra: dict[str, Any] = {
            "event_type": event.event_type,
            "aggregate_type": event.aggregate_type.__name__,  # type: ignore[union-attr]
            "aggregate_id": aggregate_id,
        }
        ctx = get_context()
        if ctx.correlation_id is not None:
            self.extra["correlation_id"] = str(ctx.correlation_id)
        if ctx.causation_id is not None:
            self.extra["causation_id"] = str(ctx.causation_id)

    def advance(self, state: ApplyState) -> None:
        self.state = state
        LOGGER.debug("Event application %s", state.value, extra={**self.extra, "state": state.value})

    def fail(self, error: BaseException) -> None:
        LOGGER.warning(
            "Event application failed",
            extra={
                **self.extra,
                "state": ApplyState.FAILED.value,
                "failed_in": self.state.value,
                "error_type": type(error).__name__,
            },
        )
        self.state = ApplyState.FAILED


class EventApplier:
    """Apply events to aggregates atomically.

    The applier is the only component allowed to change an aggregate. For
    each event it opens one transaction and, within it:

    1. resolves the target aggregate, or builds a fresh one when the event
       carries no target identifier,
    2. locks the aggregate row if it already exists,
    3. runs the event's mutation rule,
    4. validates and persists the aggregate,
    5. back-fills the event's target identifier for creation events,
    6. appends the event record.

    Either the aggregate change and the event record are both committed, or
    the transaction rolls back and neither exists. Failures are surfaced as
    typed errors and never retried.

    The session factory must be configured with ``expire_on_commit=False``
    so the returned records and aggregates stay readable after commit.

    Examples:
        >>> registry = EventTypeRegistry().discover("evented.users")
        >>> applier = EventApplier(config.session_factory, registry)
        >>>
        >>> created = await applier.apply(
        ...     Created, payload={"name": "Ongo", "email": "a@b.com", "password": "x"}
        ... )
        >>> created.record.aggregate_id == created.aggregate.id
        True
        >>>
        >>> destroyed = await applier.apply(
        ...     Destroyed, created.aggregate.id, {"id": created.aggregate.id}
        ... )
        >>> destroyed.aggregate.deleted
        True
    """

    __slots__ = ("session_factory", "registry", "store")

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        registry: EventTypeRegistry,
        store: EventStore | None = None,
    ):
        self.session_factory = session_factory
        self.registry = registry
        self.store = store or EventStore(registry)

    async def apply(
        self,
        variant: type[Event],
        aggregate_id: int | None = None,
        payload: Mapping[str, Any] | None = None,
    ) -> AppliedEvent[Any]:
        """Build an event from payload fields and apply it.

        The caller is responsible for authenticating the request and
        whitelisting the payload fields; undeclared fields are dropped.

        Args:
            variant: The registered event variant to apply.
            aggregate_id: Identifier of the target aggregate, or None (or an
                empty string) when the event creates a new aggregate.
            payload: The event's payload fields.

        Returns:
            The persisted record and the mutated aggregate.

        Raises:
            ConfigurationError: If the variant is not registered.
            NotFoundError: If ``aggregate_id`` matches no aggregate.
            ValidationError: If the payload or the mutated aggregate is invalid.
            PersistenceError: If storage fails.
        """
        self.registry.require(variant)
        event = PayloadCodec(variant).decode(payload)
        return await self.apply_event(event, aggregate_id)

    async def apply_event(
        self, event: Event, aggregate_id: int | None = None
    ) -> AppliedEvent[Any]:
        """Apply an already constructed event value.

        See :meth:`apply` for arguments and errors.
        """
        self.registry.require(type(event))
        if aggregate_id == "":
            aggregate_id = None

        # The stored payload is the one handed in, whatever apply() does to the event.
        payload = PayloadCodec(type(event)).encode(event)
        attempt = _Attempt(event, aggregate_id)
        try:
            async with self.session_factory() as session, session.begin():
                record, aggregate = await self._apply_in_transaction(
                    session, event, payload, aggregate_id, attempt
                )
        except SQLAlchemyError as err:
            attempt.fail(err)
            raise PersistenceError(
                f"Failed to persist {event.event_type} for {attempt.extra['aggregate_type']}"
            ) from err
        except Exception as err:
            attempt.fail(err)
            raise

        LOGGER.info("Event applied", extra={**attempt.extra, **self.store.describe(record)})
        context = get_context().for_event(
            f"{type(aggregate).__name__}:{record.id}"
        )
        return AppliedEvent(record=record, aggregate=aggregate, event=event, context=context)

    async def _apply_in_transaction(
        self,
        session: AsyncSession,
        event: Event,
        payload: dict[str, Any],
        aggregate_id: int | None,
        attempt: _Attempt,
    ) -> tuple[EventRecord, Aggregate]:
        repository = AggregateRepository(
            session, AggregateFactory(event.aggregate_type)  # type: ignore[arg-type]
        )

        if aggregate_id is None:
            aggregate = repository.create()
        else:
            aggregate = await repository.resolve_for_update(aggregate_id)
        attempt.advance(ApplyState.AGGREGATE_RESOLVED)

        aggregate = event.apply(aggregate)
        attempt.advance(ApplyState.MUTATED)

        await repository.save(aggregate)
        attempt.advance(ApplyState.AGGREGATE_PERSISTED)

        if aggregate_id is None:
            aggregate_id = aggregate.id
            attempt.extra["aggregate_id"] = aggregate_id

        record = await self.store.append(session, event, aggregate_id, payload)
        attempt.advance(ApplyState.EVENT_PERSISTED)
        return record, aggregate

    async def history(
        self, aggregate_type: type[Aggregate], aggregate_id: int
    ) -> list[EventRecord]:
        """Load the persisted events of one aggregate, oldest first."""
        async with self.session_factory() as session:
            return await self.store.history(session, aggregate_type, aggregate_id)
