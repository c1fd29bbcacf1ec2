"""Persisted event records, one append-only log table per aggregate kind."""

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String
from sqlalchemy import event as sa_event
from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from ..domain import Aggregate, AppendOnlyError, Base, ConfigurationError, utc_now

_LOGS: dict[type[Aggregate], type["EventRecord"]] = {}


class EventRecord(Base):
    """Base class for an aggregate kind's event log table.

    Every aggregate kind owns exactly one event log. A concrete log names
    its table and binds its aggregate through ``__aggregate__``; the
    ``aggregate_id`` foreign key is derived from that binding.

    Records are append-only. Once flushed, an update or delete of a record
    raises :class:`AppendOnlyError` before any SQL is emitted.

    Examples:
        >>> class AccountEventRecord(EventRecord):
        ...     __tablename__ = "account_events"
        ...     __aggregate__ = Account

    Attributes:
        id: Storage-assigned identifier, never reused.
        aggregate_id: Identifier of the aggregate the event targets.
        event_type: The variant's tag, stored verbatim.
        payload: The variant's encoded payload fields.
        created_at: When the record was appended.
    """

    __abstract__ = True

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    event_type: Mapped[str] = mapped_column(String(255), nullable=False)
    payload: Mapped[dict[str, Any]] = mapped_column(nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )

    @declared_attr
    def aggregate_id(cls) -> Mapped[int]:
        aggregate = cls.aggregate()
        return mapped_column(
            ForeignKey(f"{aggregate.__tablename__}.id"), nullable=False, index=True
        )

    @declared_attr.directive
    def __table_args__(cls) -> tuple[Any, ...]:
        return (Index(f"ix_{cls.__tablename__}_history", "aggregate_id", "created_at"),)

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "__aggregate__" in cls.__dict__:
            _LOGS[cls.__aggregate__] = cls

    @classmethod
    def aggregate(cls) -> type[Aggregate]:
        """The aggregate kind this log belongs to.

        Raises:
            ConfigurationError: If the log does not declare ``__aggregate__``.
        """
        aggregate = getattr(cls, "__aggregate__", None)
        if aggregate is None:
            raise ConfigurationError(
                f"Event log {cls.__name__} must declare the aggregate it belongs to"
            )
        return aggregate  # type: ignore[no-any-return]

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(id={self.id!r}, aggregate_id={self.aggregate_id!r}, "
            f"event_type={self.event_type!r})"
        )


def log_for(aggregate_type: type[Aggregate]) -> type[EventRecord]:
    """Get the event log record class of an aggregate kind.

    Raises:
        ConfigurationError: If no event log is bound to the aggregate kind.
    """
    try:
        return _LOGS[aggregate_type]
    except KeyError:
        raise ConfigurationError(
            f"No event log is bound to aggregate {aggregate_type.__name__}"
        ) from None


@sa_event.listens_for(EventRecord, "before_update", propagate=True)
def _reject_update(mapper: Any, connection: Any, target: EventRecord) -> None:
    raise AppendOnlyError(f"Event record {target!r} cannot be updated")


@sa_event.listens_for(EventRecord, "before_delete", propagate=True)
def _reject_delete(mapper: Any, connection: Any, target: EventRecord) -> None:
    raise AppendOnlyError(f"Event record {target!r} cannot be deleted")
