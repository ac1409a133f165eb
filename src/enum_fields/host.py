"""Host model capability.

The field generator never touches a model class directly; it goes through
a HostCapability. ModelHost is the default implementation and works with
any Python class:

- attributes are read and written with getattr/setattr, unless the
  instance provides read_attribute()/write_attribute()
- class-level callables become classmethods, instance-level readers become
  properties, and every installed name is recorded per accessor so a
  redefinition can remove them; a name the model already has for another
  reason (a column, a method, another field) is never replaced
- scopes build SQLAlchemy SELECT statements; mapped classes select the
  entity, other classes select "*" from a table named after the model
- polymorphic associations are discovered through an optional
  reflect_on_associations() on the model; without it nothing is polymorphic

A model can plug in its own implementation with a __enum_fields_host__
class attribute holding a HostCapability factory.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from sqlalchemy import ColumnElement, Select, column, inspect, literal_column, select, table

from enum_fields.config import settings
from enum_fields.errors import InvalidDefinitionsError
from enum_fields.registry import model_key
from enum_fields.state import ModelState, iter_states, model_state
from enum_fields.utils.inflection import pluralize
from enum_fields.validation import InclusionValidator, Validator

if TYPE_CHECKING:
    from enum_fields.field import FieldSpec

logger = logging.getLogger(__name__)

ScopePredicate = Callable[[type], ColumnElement[bool]]


@dataclass(frozen=True)
class Association:
    """A belongs-to style relation declared on a model."""

    name: str
    polymorphic: bool = False

    @property
    def type_column(self) -> str:
        return f"{self.name}{settings.polymorphic_type_suffix}"


@runtime_checkable
class HostCapability(Protocol):
    """What the field generator needs from a host model."""

    model: type

    def read_attribute(self, instance: Any, name: str) -> Any: ...

    def write_attribute(self, instance: Any, name: str, value: Any) -> None: ...

    def define_class_callable(self, accessor: str, name: str, fn: Callable[..., Any]) -> None: ...

    def define_instance_property(
        self,
        accessor: str,
        name: str,
        getter: Callable[[Any], Any],
        setter: Callable[[Any, Any], None] | None = None,
    ) -> None: ...

    def define_scope(self, accessor: str, name: str, predicate: ScopePredicate) -> None: ...

    def column_expression(self, model: type, name: str) -> Any: ...

    def add_inclusion_validation(self, accessor: str, column: str, values: Sequence[Any]) -> None: ...

    def add_custom_validation(self, accessor: str, validator: Validator) -> None: ...

    def polymorphic_association_for(self, column: str) -> str | None: ...

    def related_object(self, instance: Any, association: str) -> Any: ...

    def type_name(self, obj: Any) -> str: ...

    def check_available(self, accessor: str, names: Sequence[str]) -> None: ...

    def store_field(self, accessor: str, spec: FieldSpec) -> None: ...

    def forget(self, accessor: str) -> None: ...


class ModelHost:
    """Default HostCapability backed by Python class attributes."""

    def __init__(self, model: type) -> None:
        self.model = model

    @property
    def state(self) -> ModelState:
        return model_state(self.model)

    # ── Attribute access ──────────────────────────────────────────

    def read_attribute(self, instance: Any, name: str) -> Any:
        reader = getattr(type(instance), "read_attribute", None)
        if callable(reader):
            return reader(instance, name)
        return getattr(instance, name, None)

    def write_attribute(self, instance: Any, name: str, value: Any) -> None:
        writer = getattr(type(instance), "write_attribute", None)
        if callable(writer):
            writer(instance, name, value)
        else:
            setattr(instance, name, value)

    # ── Behavior installation ─────────────────────────────────────

    def _generated_by_ancestor(self, name: str) -> bool:
        own = model_state(self.model, create=False)
        return any(
            name in names
            for state in iter_states(self.model)
            if state is not own
            for names in state.installed.values()
        )

    def check_available(self, accessor: str, names: Sequence[str]) -> None:
        """Fail unless every name is free for this accessor to install.

        A name is free when the model has no such attribute, when this
        accessor installed it before, or when a base class got it from its
        own enum field (the subclass shadows it).

        Raises:
            InvalidDefinitionsError: A name repeats within `names`, or the
                model already has the attribute for another reason (a
                column, a regular method, another enum field)
        """
        state = model_state(self.model, create=False)
        owned = set(state.installed.get(accessor, ())) if state is not None else set()
        seen: set[str] = set()

        for name in names:
            if name in seen:
                raise InvalidDefinitionsError(
                    f"Enum field {accessor!r} on {self.model.__qualname__} "
                    f"would define {name!r} twice"
                )
            seen.add(name)
            if name in owned or not hasattr(self.model, name) or self._generated_by_ancestor(name):
                continue
            raise InvalidDefinitionsError(
                f"Enum field {accessor!r} cannot define {name!r}: "
                f"{self.model.__qualname__}.{name} already exists"
            )

    def _install(self, accessor: str, name: str, attribute: Any) -> None:
        setattr(self.model, name, attribute)
        names = self.state.installed.setdefault(accessor, [])
        if name not in names:
            names.append(name)

    def define_class_callable(self, accessor: str, name: str, fn: Callable[..., Any]) -> None:
        """Install fn(cls, ...) as a classmethod."""
        fn.__name__ = name
        fn.__qualname__ = f"{self.model.__qualname__}.{name}"
        self._install(accessor, name, classmethod(fn))

    def define_instance_property(
        self,
        accessor: str,
        name: str,
        getter: Callable[[Any], Any],
        setter: Callable[[Any, Any], None] | None = None,
    ) -> None:
        self._install(accessor, name, property(getter, setter, doc=getter.__doc__))

    def store_field(self, accessor: str, spec: FieldSpec) -> None:
        """Record the field in the model-local field table."""
        self.state.fields[accessor] = spec

    def forget(self, accessor: str) -> None:
        """Remove every name and validator installed for an accessor."""
        state = self.state
        for name in state.installed.pop(accessor, []):
            if name in self.model.__dict__:
                delattr(self.model, name)
        state.validators.pop(accessor, None)

    # ── Scopes ────────────────────────────────────────────────────

    def column_expression(self, model: type, name: str) -> Any:
        """SQL expression for a storage column of the model."""
        if inspect(model, raiseerr=False) is not None:
            return getattr(model, name)
        return column(name)

    def _table_name(self, model: type) -> str:
        tablename = getattr(model, "__tablename__", None)
        if isinstance(tablename, str):
            return tablename
        return pluralize(model_key(model).replace("/", "_"))

    def define_scope(self, accessor: str, name: str, predicate: ScopePredicate) -> None:
        host = self

        def scope(cls: type) -> Select[Any]:
            if inspect(cls, raiseerr=False) is not None:
                return select(cls).where(predicate(cls))
            return select(literal_column("*")).select_from(table(host._table_name(cls))).where(predicate(cls))

        self.define_class_callable(accessor, name, scope)

    # ── Validation ────────────────────────────────────────────────

    def add_inclusion_validation(self, accessor: str, column: str, values: Sequence[Any]) -> None:
        self.state.validators[accessor] = InclusionValidator(self, column, tuple(values))

    def add_custom_validation(self, accessor: str, validator: Validator) -> None:
        self.state.validators[accessor] = validator

    # ── Association reflection ────────────────────────────────────

    def _associations(self) -> Iterable[Any]:
        reflect = getattr(self.model, "reflect_on_associations", None)
        if not callable(reflect):
            return ()
        return reflect()

    def polymorphic_association_for(self, column: str) -> str | None:
        """Name of the polymorphic association whose type column is `column`."""
        for association in self._associations():
            if not getattr(association, "polymorphic", False):
                continue
            name = getattr(association, "name", None)
            if name and f"{name}{settings.polymorphic_type_suffix}" == column:
                return name
        return None

    def related_object(self, instance: Any, association: str) -> Any:
        return getattr(instance, association, None)

    def type_name(self, obj: Any) -> str:
        return type(obj).__name__


def host_for(model: type) -> HostCapability:
    """Build the host capability for a model class."""
    factory = getattr(model, "__enum_fields_host__", None) or ModelHost
    return factory(model)
