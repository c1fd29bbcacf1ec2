from typing import Generic, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..domain import Aggregate, NotFoundError, ValidationError

A = TypeVar("A", bound=Aggregate)


class AggregateFactory(Generic[A]):
    """Factory for creating aggregate instances of a specific type."""

    def __init__(self, aggregate_type: type[A]):
        self._aggregate_type = aggregate_type

    def get_type(self) -> type[A]:
        """Get the aggregate type this factory produces."""
        return self._aggregate_type

    def create(self) -> A:
        """Create a new, not yet persisted aggregate instance."""
        return self._aggregate_type()


class AggregateRepository(Generic[A]):
    """A mechanism for finding, locking and saving aggregates of one kind.

    The repository works inside a session owned by the caller. It never
    commits: the caller's transaction decides whether the changes made
    through the repository become durable.
    """

    __slots__ = ("session", "factory")

    def __init__(self, session: AsyncSession, factory: AggregateFactory[A]):
        self.session = session
        self.factory = factory

    @property
    def aggregate_type(self) -> type[A]:
        return self.factory.get_type()

    async def resolve(self, aggregate_id: int) -> A:
        """Find an existing aggregate.

        Args:
            aggregate_id: Identifier of the aggregate.

        Returns:
            The aggregate.

        Raises:
            NotFoundError: If no aggregate has this identifier. A missing
                aggregate is never created implicitly.
        """
        aggregate = await self.session.get(self.aggregate_type, aggregate_id)
        if aggregate is None:
            raise NotFoundError(self.aggregate_type.__name__, aggregate_id)
        return aggregate

    async def resolve_for_update(self, aggregate_id: int) -> A:
        """Find an existing aggregate and lock its row in one read.

        The row is loaded with ``SELECT ... FOR UPDATE``, overwriting any
        copy already in the session, and the lock is held until the
        enclosing transaction commits or rolls back.

        Raises:
            NotFoundError: If no aggregate has this identifier.
        """
        aggregate = await self.session.get(
            self.aggregate_type,
            aggregate_id,
            with_for_update=True,
            populate_existing=True,
        )
        if aggregate is None:
            raise NotFoundError(self.aggregate_type.__name__, aggregate_id)
        return aggregate

    def create(self) -> A:
        return self.factory.create()

    async def lock(self, aggregate: A) -> None:
        """Take an exclusive row lock on a persisted aggregate.

        The row is re-read with ``SELECT ... FOR UPDATE`` so the aggregate
        reflects the latest committed state, and the lock is held until the
        enclosing transaction commits or rolls back. Transient aggregates
        have no row yet and are left alone.
        """
        if not aggregate.is_persisted:
            return
        await self.session.refresh(aggregate, with_for_update=True)

    async def save(self, aggregate: A) -> A:
        """Validate and flush an aggregate.

        Flushing assigns the identifier of a new aggregate.

        Raises:
            ValidationError: If the aggregate fails its own constraints or
                violates a database integrity constraint.
        """
        if errors := aggregate.validate():
            raise ValidationError(
                f"{self.aggregate_type.__name__} is invalid", errors=errors
            )

        self.session.add(aggregate)
        try:
            await self.session.flush()
        except IntegrityError as err:
            raise ValidationError(
                f"{self.aggregate_type.__name__} violates a storage constraint",
                errors=[{"field": None, "message": str(err.orig)}],
            ) from err
        return aggregate
