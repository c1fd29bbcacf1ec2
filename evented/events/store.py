"""Append-only event store backed by one SQL table per aggregate kind."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..domain import Aggregate, Event, utc_now
from .codec import PayloadCodec
from .record import EventRecord, log_for
from .registry import EventTypeRegistry


class EventStore:
    """Durable, append-only log of persisted events.

    The store is partitioned by aggregate kind: each kind's records live in
    its own :class:`EventRecord` table. Records can be appended and read
    back, never updated or deleted.

    The store does not own a session. Every operation runs inside the
    caller's session so that appending an event joins the transaction that
    persists the aggregate.

    Examples:
        >>> store = EventStore(registry)
        >>> async with session_factory() as session, session.begin():
        ...     record = await store.append(session, Created(name="Ongo"), user.id)
        >>>
        >>> async with session_factory() as session:
        ...     history = await store.history(session, User, user.id)
        ...     events = [store.load(record) for record in history]
    """

    __slots__ = ("registry",)

    def __init__(self, registry: EventTypeRegistry):
        self.registry = registry

    def log_for(self, aggregate_type: type[Aggregate]) -> type[EventRecord]:
        """Get the event log record class of an aggregate kind.

        Raises:
            ConfigurationError: If no event log is bound to the aggregate kind.
        """
        return log_for(aggregate_type)

    async def append(
        self,
        session: AsyncSession,
        event: Event,
        aggregate_id: int,
        payload: dict[str, Any] | None = None,
    ) -> EventRecord:
        """Append a record for an event to its aggregate kind's log.

        The record is flushed so that its identifier is assigned, but the
        transaction is left for the caller to commit.

        Args:
            session: The session of the enclosing transaction.
            event: The event value to persist.
            aggregate_id: Identifier of the aggregate the event targets.
            payload: The already encoded payload. Encoded from ``event`` when
                omitted.

        Returns:
            The persisted record.
        """
        record_type = self.log_for(event.aggregate_type)  # type: ignore[arg-type]
        record = record_type(
            aggregate_id=aggregate_id,
            event_type=event.event_type,
            payload=PayloadCodec(type(event)).encode(event) if payload is None else payload,
            created_at=utc_now(),
        )
        session.add(record)
        await session.flush()
        return record

    async def history(
        self, session: AsyncSession, aggregate_type: type[Aggregate], aggregate_id: int
    ) -> list[EventRecord]:
        """Load every record of one aggregate, oldest first."""
        record_type = self.log_for(aggregate_type)
        result = await session.execute(
            select(record_type)
            .where(record_type.aggregate_id == aggregate_id)
            .order_by(record_type.created_at, record_type.id)
        )
        return list(result.scalars().all())

    async def get(
        self, session: AsyncSession, aggregate_type: type[Aggregate], event_id: int
    ) -> EventRecord | None:
        return await session.get(self.log_for(aggregate_type), event_id)

    def load(self, record: EventRecord) -> Event:
        """Rebuild the event value of a persisted record.

        The variant is resolved from the stored tag, never from the
        current class names, so records keep loading after code moves.

        Raises:
            ConfigurationError: If the stored tag is not registered.
        """
        variant = self.registry.resolve(record.aggregate(), record.event_type)
        return PayloadCodec(variant).decode(record.payload)

    def describe(self, record: EventRecord) -> dict[str, Any]:
        return {
            "event_id": record.id,
            "event_type": record.event_type,
            "aggregate_type": record.aggregate().__name__,
            "aggregate_id": record.aggregate_id,
        }
