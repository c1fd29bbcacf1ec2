"""Tally aggregate and events for testing."""

from typing import Any

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from evented import Aggregate, Event, EventRecord


# Aggregate
class Tally(Aggregate):
    __tablename__ = "tallies"

    label: Mapped[str | None] = mapped_column(String(100))
    count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def validate(self) -> list[dict[str, Any]]:
        if self.count is not None and self.count < 0:
            return [{"field": "count", "message": "must be greater than or equal to 0"}]
        return []


class TallyEventRecord(EventRecord):
    __tablename__ = "tally_events"
    __aggregate__ = Tally


# Events
class TallyEvent(Event):
    aggregate_type = Tally


class Started(TallyEvent):
    label: str | None = None

    def apply(self, tally: Tally) -> Tally:
        tally.label = self.label
        tally.count = 0
        return tally


class Incremented(TallyEvent):
    by: int = 1

    def apply(self, tally: Tally) -> Tally:
        tally.count += self.by
        return tally


class Exploded(TallyEvent):
    def apply(self, tally: Tally) -> Tally:
        raise RuntimeError("boom")


class Annotated(TallyEvent):
    """Declares payload fields but no mutation rule."""

    note: str | None = None
