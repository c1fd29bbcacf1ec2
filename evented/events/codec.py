"""Mapping between an event variant's fields and its stored payload."""

from collections.abc import Mapping
from typing import Any, Generic, TypeVar

from pydantic import ValidationError as PydanticValidationError

from ..domain import Event, ValidationError

E = TypeVar("E", bound=Event)


class PayloadCodec(Generic[E]):
    """Encode and decode the payload of one event variant.

    The payload is the opaque JSON map stored with every event record. It
    is scoped to exactly the fields the variant declares: undeclared keys
    are dropped on decode and cannot be read or written through the codec.

    Examples:
        >>> codec = PayloadCodec(Created)
        >>> codec.fields
        ('name', 'email', 'password')
        >>> payload = codec.set(None, "name", "Ongo")
        >>> codec.get(payload, "name")
        'Ongo'
        >>> codec.get(payload, "email") is None
        True
        >>> event = codec.decode(payload)
        >>> codec.encode(event)
        {'name': 'Ongo'}
    """

    __slots__ = ("event_type",)

    def __init__(self, event_type: type[E]):
        self.event_type = event_type

    @property
    def fields(self) -> tuple[str, ...]:
        """Declared payload field names in declaration order."""
        return tuple(self.event_type.model_fields)

    def get(self, payload: Mapping[str, Any] | None, field: str) -> Any:
        """Read a declared field from a payload map.

        Args:
            payload: The stored payload, or None if none was supplied.
            field: Name of a declared payload field.

        Returns:
            The stored value, or None when the field is missing.

        Raises:
            AttributeError: If the field is not declared by the variant.
        """
        self._require_declared(field)
        if payload is None:
            return None
        return payload.get(field)

    def set(self, payload: dict[str, Any] | None, field: str, value: Any) -> dict[str, Any]:
        """Write a declared field into a payload map.

        Args:
            payload: The payload map to write into. A new empty map is
                created when None.
            field: Name of a declared payload field.
            value: The value to store.

        Returns:
            The payload map holding the new value.

        Raises:
            AttributeError: If the field is not declared by the variant.
        """
        self._require_declared(field)
        if payload is None:
            payload = {}
        payload[field] = value
        return payload

    def encode(self, event: E) -> dict[str, Any]:
        """Serialize the fields supplied to an event into a payload map."""
        return event.model_dump(mode="json", exclude_unset=True)

    def decode(self, payload: Mapping[str, Any] | None) -> E:
        """Build an event value from a payload map.

        Raises:
            ValidationError: If a field value does not fit its declared type.
        """
        try:
            return self.event_type.model_validate(dict(payload or {}))
        except PydanticValidationError as err:
            raise ValidationError(
                f"Invalid payload for {self.event_type.__name__}",
                errors=[
                    {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
                    for error in err.errors()
                ],
            ) from err

    def _require_declared(self, field: str) -> None:
        if field not in self.event_type.model_fields:
            raise AttributeError(
                f"{self.event_type.__name__} declares no payload field '{field}'"
            )
