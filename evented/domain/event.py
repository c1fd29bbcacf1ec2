from typing import Any, ClassVar, TypeVar

from pydantic import BaseModel, ConfigDict

from .aggregate import Aggregate
from .exceptions import UnimplementedMutationError

A = TypeVar("A", bound=Aggregate)


class Event(BaseModel):
    """Base class for event variants.

    An event variant is an immutable fact about an aggregate. Its pydantic
    fields are exactly the payload fields the variant declares; nothing
    else ends up in the stored payload. Each variant is statically bound to
    one aggregate kind through ``aggregate_type`` and carries a type tag,
    ``event_type``, fixed when the class is defined.

    Variants implement :meth:`apply`, the mutation rule. It reads the
    event's own payload fields, writes onto the aggregate passed in and
    returns it. It must not touch any other external state.

    Examples:
        Declare a variant for an ``Account`` aggregate:

        >>> class AccountOpened(Event):
        ...     aggregate_type = Account
        ...     owner: str | None = None
        ...
        ...     def apply(self, account: Account) -> Account:
        ...         account.owner = self.owner
        ...         return account
        >>>
        >>> AccountOpened.event_type
        'AccountOpened'

        Pin the tag so that stored records keep resolving after a rename:

        >>> class OwnerChanged(Event):
        ...     event_type = "OwnerRenamed"
        ...     aggregate_type = Account

    Attributes:
        event_type: Tag stored with every record of this variant. Defaults
            to the short class name.
        aggregate_type: The aggregate kind this variant applies to.
    """

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    event_type: ClassVar[str] = "Event"
    aggregate_type: ClassVar[type[Aggregate] | None] = None

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        # The tag is fixed here, never re-derived later from the class name.
        if "event_type" not in cls.__dict__:
            cls.event_type = cls.__name__

    @classmethod
    def defines_mutation_rule(cls) -> bool:
        """Whether this variant (or one of its bases) overrides :meth:`apply`."""
        return cls.apply is not Event.apply

    def apply(self, aggregate: A) -> A:
        """Mutate the aggregate according to this event.

        Args:
            aggregate: The resolved or freshly built aggregate.

        Returns:
            The mutated aggregate.

        Raises:
            UnimplementedMutationError: If the variant defines no rule.
        """
        raise UnimplementedMutationError(type(self))
