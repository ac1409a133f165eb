"""Validation channel for enum fields.

Validation never raises. Each validator inspects one instance and adds
messages to an Errors collection keyed by field (or association) name.

Two validators are installed by the field generator:
- InclusionValidator: the column value must be one of the allowed values,
  None allowed.
- PolymorphicTypeValidator: for "<association>_type" columns, checks the
  loaded related object's type name, or the raw column when nothing is
  loaded.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from enum_fields.config import settings
from enum_fields.state import iter_states

if TYPE_CHECKING:
    from enum_fields.host import HostCapability

Validator = Callable[[Any, "Errors"], None]


class Errors:
    """Validation messages grouped by field name."""

    def __init__(self) -> None:
        self._messages: dict[str, list[str]] = {}

    def add(self, field: str, message: str) -> None:
        self._messages.setdefault(field, []).append(message)

    def clear(self) -> None:
        self._messages.clear()

    def __getitem__(self, field: str) -> list[str]:
        return list(self._messages.get(field, []))

    def __contains__(self, field: object) -> bool:
        return field in self._messages

    def __iter__(self) -> Iterator[str]:
        return iter(self._messages)

    def __len__(self) -> int:
        return sum(len(messages) for messages in self._messages.values())

    def __bool__(self) -> bool:
        return bool(self._messages)

    def __repr__(self) -> str:
        return f"Errors({self._messages!r})"

    def to_dict(self) -> dict[str, list[str]]:
        return {field: list(messages) for field, messages in self._messages.items()}

    def full_messages(self) -> list[str]:
        """Messages prefixed with their field name, e.g. "status must be one of: a, b"."""
        return [f"{field} {message}" for field, messages in self._messages.items() for message in messages]


def inclusion_message(allowed: Sequence[Any]) -> str:
    return settings.inclusion_message.format(values=", ".join(str(value) for value in allowed))


@dataclass(frozen=True)
class InclusionValidator:
    """The column value must be one of the allowed values (None allowed)."""

    host: HostCapability
    column: str
    allowed: tuple[Any, ...]

    def __call__(self, instance: Any, errors: Errors) -> None:
        value = self.host.read_attribute(instance, self.column)
        if value is None or value in self.allowed:
            return
        errors.add(self.column, inclusion_message(self.allowed))


@dataclass(frozen=True)
class PolymorphicTypeValidator:
    """Allowed-type check for the type column of a polymorphic association.

    With a related object loaded, its type name is checked and the error is
    attached to the association. Otherwise the raw column value is checked
    (None is valid) and the error is attached to the column.
    """

    host: HostCapability
    association: str
    column: str
    allowed: tuple[Any, ...]

    def __call__(self, instance: Any, errors: Errors) -> None:
        related = self.host.related_object(instance, self.association)
        if related is not None:
            if self.host.type_name(related) not in self.allowed:
                errors.add(self.association, inclusion_message(self.allowed))
            return

        value = self.host.read_attribute(instance, self.column)
        if value is None:
            return
        if value not in self.allowed:
            errors.add(self.column, inclusion_message(self.allowed))


def run_validations(instance: Any, errors: Errors | None = None) -> Errors:
    """Run every enum field validator declared along the instance's class MRO.

    Args:
        instance: A model instance
        errors: Collection to fill; a new one is created when omitted

    Returns:
        The errors collection (empty when the instance is valid)
    """
    errors = errors if errors is not None else Errors()
    validators: dict[str, Validator] = {}
    for state in iter_states(type(instance)):
        validators.update(state.validators)

    for validator in validators.values():
        validator(instance, errors)
    return errors
