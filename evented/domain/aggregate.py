from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Integer, inspect
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


class Base(DeclarativeBase):
    """Declarative base shared by aggregates and event logs.

    All aggregate tables and event log tables live in ``Base.metadata`` so
    that a single ``create_all`` builds the whole schema.
    """

    type_annotation_map = {dict[str, Any]: JSON}


class Aggregate(Base):
    """Base class for every entity that events can target.

    An aggregate is a plain SQLAlchemy model whose state is only ever
    changed by the mutation rule of an event. Storage assigns the integer
    identifier on first persistence. Deletion is modelled by the
    ``deleted`` flag; rows are never physically removed.

    Subclasses declare their own table and domain columns, and override
    :meth:`validate` to enforce field constraints before the aggregate is
    saved.

    Examples:
        >>> class Account(Aggregate):
        ...     __tablename__ = "accounts"
        ...     owner: Mapped[str | None] = mapped_column(String(255))
        ...
        ...     def validate(self) -> list[dict[str, Any]]:
        ...         if not self.owner:
        ...             return [{"field": "owner", "message": "can't be blank"}]
        ...         return []

    Attributes:
        id: Storage-assigned identifier, ``None`` until first flush.
        deleted: Soft-delete flag.
        created_at: When the row was first persisted.
        updated_at: When the row was last persisted.
    """

    __abstract__ = True

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now
    )

    def __init__(self, **kwargs: Any) -> None:
        kwargs.setdefault("deleted", False)
        super().__init__(**kwargs)

    @property
    def is_persisted(self) -> bool:
        """Whether the aggregate has a row in storage."""
        return inspect(self).persistent

    def validate(self) -> list[dict[str, Any]]:
        """Check the aggregate's field constraints.

        Returns:
            A list of field-level errors. An empty list means the
            aggregate is valid and may be saved.
        """
        return []
