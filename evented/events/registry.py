"""Registry of event variants keyed by aggregate kind and type tag."""

from collections.abc import Iterator

from ..discovery import ClassScanner, ModuleScanner
from ..domain import Aggregate, ConfigurationError, Event, UnimplementedMutationError
from .record import log_for


class EventTypeRegistry:
    """Closed mapping from stored type tags to event variants.

    Every variant that can be applied or read back must be registered.
    Registration validates the variant up front so that configuration
    mistakes surface at startup rather than on the first request:

    - the variant must declare the aggregate kind it applies to,
    - that aggregate kind must have an event log,
    - the variant must define a mutation rule,
    - its tag must be unique within the aggregate kind.

    Tags are scoped per aggregate kind, mirroring the one-log-per-kind
    storage layout: ``Created`` for users and ``Created`` for accounts
    are distinct variants.

    Examples:
        >>> registry = EventTypeRegistry()
        >>> registry.register(Created, Destroyed)
        >>> registry.resolve(User, "Created")
        <class 'evented.users.events.Created'>

        Populate from a package by convention:

        >>> registry = EventTypeRegistry().discover("evented.users")
    """

    def __init__(self) -> None:
        self._variants: dict[type[Aggregate], dict[str, type[Event]]] = {}

    def register(self, *variants: type[Event]) -> None:
        """Register event variants.

        Registering a variant that is already registered is a no-op.

        Args:
            *variants: The event variants to register.

        Raises:
            ConfigurationError: If a variant has no aggregate kind, its
                aggregate kind has no event log, or its tag collides with
                another variant of the same aggregate kind.
            UnimplementedMutationError: If a variant has no mutation rule.
        """
        for variant in variants:
            aggregate_type = variant.aggregate_type
            if aggregate_type is None:
                raise ConfigurationError(
                    f"Event {variant.__name__} must declare the aggregate it applies to"
                )
            log_for(aggregate_type)
            if not variant.defines_mutation_rule():
                raise UnimplementedMutationError(variant)

            tags = self._variants.setdefault(aggregate_type, {})
            existing = tags.get(variant.event_type)
            if existing is not None and existing is not variant:
                raise ConfigurationError(
                    f"Event type '{variant.event_type}' of {aggregate_type.__name__} "
                    f"is already registered to {existing.__qualname__}"
                )
            tags[variant.event_type] = variant

    def discover(self, package_name: str) -> "EventTypeRegistry":
        """Register every concrete event variant found in a package.

        A class counts as a concrete variant when it derives from
        :class:`Event`, is defined in the scanned module and defines a
        mutation rule. Intermediate bases that only bind an aggregate kind
        are skipped.

        Args:
            package_name: Fully qualified name of the package to scan.

        Returns:
            The registry, for chaining.
        """
        scanner = ModuleScanner(package_name)
        for module in scanner.scan_all_modules():
            self.register(
                *ClassScanner.find_subclasses(
                    module, Event, lambda cls: cls.defines_mutation_rule()
                )
            )
        return self

    def resolve(self, aggregate_type: type[Aggregate], event_type: str) -> type[Event]:
        """Get the variant registered for a stored tag.

        Raises:
            ConfigurationError: If no variant is registered for the tag.
        """
        try:
            return self._variants[aggregate_type][event_type]
        except KeyError:
            raise ConfigurationError(
                f"Unknown event type '{event_type}' for aggregate {aggregate_type.__name__}"
            ) from None

    def require(self, variant: type[Event]) -> None:
        """Ensure a variant was registered.

        Raises:
            ConfigurationError: If the variant is not registered.
        """
        if variant not in self:
            raise ConfigurationError(f"Event {variant.__qualname__} is not registered")

    def variants_for(self, aggregate_type: type[Aggregate]) -> tuple[type[Event], ...]:
        return tuple(self._variants.get(aggregate_type, {}).values())

    def aggregate_types(self) -> tuple[type[Aggregate], ...]:
        return tuple(self._variants)

    def __contains__(self, variant: object) -> bool:
        if not isinstance(variant, type) or not issubclass(variant, Event):
            return False
        if variant.aggregate_type is None:
            return False
        tags = self._variants.get(variant.aggregate_type, {})
        return tags.get(variant.event_type) is variant

    def __iter__(self) -> Iterator[type[Event]]:
        for tags in self._variants.values():
            yield from tags.values()

    def __len__(self) -> int:
        return sum(len(tags) for tags in self._variants.values())
