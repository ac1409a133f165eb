"""Enum field generator.

Given a model, an accessor name and a raw definition, synthesizes:

Model level (classmethods):
    statuses()               -> the definition mapping
    statuses_count()         -> number of entries
    status_values()          -> entry values in definition order
    status_options()         -> (label, key) pairs in definition order
    active_status_value()    -> the value of the "active" entry
    active_status()          -> SELECT ... WHERE status = 'active'

Instance level (properties):
    status                   -> column value (only when column != accessor)
    status_metadata          -> metadata entry for the current value, or None
    status_label, status_<property>
    is_active_status         -> current value == value of "active"

plus inclusion validation (or polymorphic type validation) of the column.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from enum_fields.config import settings
from enum_fields.definition import EnumDefinition, Metadata, normalize_key
from enum_fields.errors import MissingDefinitionsError
from enum_fields.host import HostCapability, host_for
from enum_fields.registry import register
from enum_fields.utils.inflection import pluralize
from enum_fields.validation import PolymorphicTypeValidator

logger = logging.getLogger(__name__)


class FieldOptions(BaseModel):
    """Options accepted by define_enum_field()."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    column: str | None = Field(default=None, description="Storage attribute; defaults to the accessor")
    validate_values: bool = Field(
        default_factory=lambda: settings.validate_by_default,
        alias="validate",
        description="Install inclusion validation for the column",
    )


@dataclass(frozen=True)
class FieldSpec:
    """One enum field on one model."""

    model: type
    accessor: str
    column: str
    definition: EnumDefinition
    validate: bool = True

    @property
    def collection_name(self) -> str:
        return pluralize(self.accessor)

    def value_accessor_name(self, key: str) -> str:
        return f"{key}_{self.accessor}_value"

    def reader_name(self, prop: str) -> str:
        return f"{self.accessor}_{prop}"

    def predicate_name(self, key: str) -> str:
        return f"is_{key}_{self.accessor}"

    def scope_name(self, key: str) -> str:
        return f"{key}_{self.accessor}"

    def synthesized_names(self) -> list[str]:
        """Every attribute name the field installs on the model, in install order."""
        accessor, collection = self.accessor, self.collection_name
        names = [collection, f"{collection}_count", f"{accessor}_values", f"{accessor}_options"]
        names += [self.value_accessor_name(key) for key in self.definition]
        if accessor != self.column:
            names.append(accessor)
        names.append(f"{accessor}_metadata")
        names += [self.reader_name(prop) for prop in self.definition.properties]
        names += [self.predicate_name(key) for key in self.definition]
        names += [self.scope_name(key) for key in self.definition]
        return names


class EnumField:
    """Synthesizes the behavior surface of one enum field on a model."""

    def __init__(
        self,
        model: type,
        accessor: Any,
        definition: Any,
        options: FieldOptions | None = None,
        host: HostCapability | None = None,
    ) -> None:
        options = options or FieldOptions()
        accessor = normalize_key(accessor)
        self.spec = FieldSpec(
            model=model,
            accessor=accessor,
            column=normalize_key(options.column) if options.column is not None else accessor,
            definition=EnumDefinition(definition),
            validate=options.validate_values,
        )
        self.host = host or host_for(model)

    @classmethod
    def define(cls, model: type, accessor: Any, definition: Any, **options: Any) -> FieldSpec:
        return cls(model, accessor, definition, FieldOptions(**options)).define_all()

    def define_all(self) -> FieldSpec:
        """Install everything for this field, replacing a previous definition."""
        spec = self.spec
        self.host.check_available(spec.accessor, spec.synthesized_names())
        self.host.forget(spec.accessor)

        register(spec.model, spec.accessor, spec.definition)
        self._store_spec()
        self._define_collection_methods()
        self._define_value_accessors()
        self._define_getter_and_setter()
        self._define_metadata_property()
        self._define_property_readers()
        self._define_predicates()
        self._define_scopes()
        self._define_validation()

        logger.debug(
            "Defined enum field %s.%s on column %r with %d entries",
            spec.model.__qualname__,
            spec.accessor,
            spec.column,
            len(spec.definition),
        )
        return spec

    # ── Model level ───────────────────────────────────────────────

    def _store_spec(self) -> None:
        self.host.store_field(self.spec.accessor, self.spec)

    def _define_collection_methods(self) -> None:
        accessor = self.spec.accessor
        definition = self.spec.definition
        collection = self.spec.collection_name

        def collection_method(cls: type) -> EnumDefinition:
            return definition

        def count_method(cls: type) -> int:
            return len(definition)

        def values_method(cls: type) -> list[Any]:
            return definition.allowed_values

        def options_method(cls: type) -> list[tuple[Any, str]]:
            return definition.options

        self.host.define_class_callable(accessor, collection, collection_method)
        self.host.define_class_callable(accessor, f"{collection}_count", count_method)
        self.host.define_class_callable(accessor, f"{accessor}_values", values_method)
        self.host.define_class_callable(accessor, f"{accessor}_options", options_method)

    def _define_value_accessors(self) -> None:
        accessor = self.spec.accessor
        for key, metadata in self.spec.definition.items():
            value = metadata["value"]

            def value_method(cls: type, value: Any = value) -> Any:
                return value

            self.host.define_class_callable(accessor, self.spec.value_accessor_name(key), value_method)

    # ── Instance level ────────────────────────────────────────────

    def _define_getter_and_setter(self) -> None:
        accessor, column = self.spec.accessor, self.spec.column
        if accessor == column:
            return
        host = self.host

        def getter(instance: Any) -> Any:
            return host.read_attribute(instance, column)

        def setter(instance: Any, value: Any) -> None:
            host.write_attribute(instance, column, value)

        host.define_instance_property(accessor, accessor, getter, setter)

    def _lookup(self, instance: Any) -> Metadata | None:
        return self.spec.definition.resolve(self.host.read_attribute(instance, self.spec.column))

    def _define_metadata_property(self) -> None:
        lookup = self._lookup

        def metadata(instance: Any) -> Metadata | None:
            """Metadata entry for the current column value."""
            return lookup(instance)

        self.host.define_instance_property(self.spec.accessor, f"{self.spec.accessor}_metadata", metadata)

    def _define_property_readers(self) -> None:
        accessor = self.spec.accessor
        lookup = self._lookup

        for prop in self.spec.definition.properties:

            def reader(instance: Any, prop: str = prop) -> Any:
                metadata = lookup(instance)
                if metadata is None:
                    return None
                return metadata.get(prop)

            self.host.define_instance_property(accessor, self.spec.reader_name(prop), reader)

    def _define_predicates(self) -> None:
        accessor, column = self.spec.accessor, self.spec.column
        host = self.host

        for key, metadata in self.spec.definition.items():
            value = metadata["value"]

            def predicate(instance: Any, value: Any = value) -> bool:
                current = host.read_attribute(instance, column)
                return current is not None and current == value

            host.define_instance_property(accessor, self.spec.predicate_name(key), predicate)

    def _define_scopes(self) -> None:
        accessor, column = self.spec.accessor, self.spec.column
        host = self.host

        for key, metadata in self.spec.definition.items():
            value = metadata["value"]

            def where(model: type, value: Any = value) -> Any:
                return host.column_expression(model, column) == value

            host.define_scope(accessor, self.spec.scope_name(key), where)

    # ── Validation ────────────────────────────────────────────────

    def _define_validation(self) -> None:
        spec = self.spec
        if not spec.validate or spec.definition.is_blank:
            logger.debug("Skipping validation for %s.%s", spec.model.__qualname__, spec.accessor)
            return

        allowed = tuple(spec.definition.allowed_values)
        association = self.host.polymorphic_association_for(spec.column)

        if association is not None:
            logger.debug(
                "Column %r of %s is the type column of polymorphic association %r",
                spec.column,
                spec.model.__qualname__,
                association,
            )
            self.host.add_custom_validation(
                spec.accessor,
                PolymorphicTypeValidator(self.host, association, spec.column, allowed),
            )
        else:
            self.host.add_inclusion_validation(spec.accessor, spec.column, allowed)


def define_enum_field(model: type, accessor: Any, definition: Any, **options: Any) -> FieldSpec:
    """Define an enum field on a model class.

    Args:
        model: The host model class
        accessor: Public field name; generated names derive from it
        definition: Mapping of key -> metadata, or a sequence of scalars
        **options: column (storage attribute, defaults to accessor) and
            validate (install validation, defaults to True)

    Returns:
        The FieldSpec that was installed

    Raises:
        MissingDefinitionsError: definition is None or False
        InvalidDefinitionsError: definition is malformed
    """
    if definition is None or definition is False:
        raise MissingDefinitionsError()
    return EnumField.define(model, accessor, definition, **options)
