"""Model-level API for enum fields.

Mix EnumFieldsMixin into a model class (a plain class or a SQLAlchemy
declarative model) to get:

    class Order(EnumFieldsMixin, Base):
        ...

    Order.enum_field("status", {"pending": {"value": "pending"}, ...})
    Order.enum_field_for("status")
    order.enum_fields_metadata()
    order.is_valid(); order.errors["status"]

The module-level functions work on any class, mixin or not.
"""

from __future__ import annotations

from typing import Any

from enum_fields.definition import EnumDefinition, Metadata, normalize_key
from enum_fields.field import FieldSpec, define_enum_field
from enum_fields.host import Association, host_for
from enum_fields.state import field_specs
from enum_fields.validation import Errors, run_validations

_ERRORS_ATTR = "_enum_field_errors"


def enum_fields(model: type) -> dict[str, EnumDefinition]:
    """Accessor -> definition for every enum field of a model."""
    return {accessor: spec.definition for accessor, spec in field_specs(model).items()}


def enum_field_for(model: type, accessor: Any) -> EnumDefinition | None:
    """Definition of one field, or None when the accessor is not an enum field."""
    spec = field_specs(model).get(normalize_key(accessor))
    return spec.definition if spec is not None else None


def has_enum_field(model: type, accessor: Any) -> bool:
    return normalize_key(accessor) in field_specs(model)


def enum_fields_metadata(instance: Any) -> dict[str, Metadata | None]:
    """Accessor -> metadata entry for the instance's current value of each field."""
    metadata: dict[str, Metadata | None] = {}
    for accessor, spec in field_specs(type(instance)).items():
        value = host_for(spec.model).read_attribute(instance, spec.column)
        metadata[accessor] = spec.definition.resolve(value)
    return metadata


class BelongsTo:
    """Descriptor for a belongs-to relation stored as <name>_id (+ <name>_type).

    Assigning an object stores it and fills the id column, and for a
    polymorphic relation the type column with the object's class name.
    """

    def __init__(self, name: str, *, polymorphic: bool = False) -> None:
        self.association = Association(name, polymorphic)

    @property
    def name(self) -> str:
        return self.association.name

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return instance.__dict__.get(f"_loaded_{self.name}")

    def __set__(self, instance: Any, obj: Any) -> None:
        instance.__dict__[f"_loaded_{self.name}"] = obj
        setattr(instance, f"{self.name}_id", getattr(obj, "id", None) if obj is not None else None)
        if self.association.polymorphic:
            setattr(instance, self.association.type_column, type(obj).__name__ if obj is not None else None)


class EnumFieldsMixin:
    """Adds enum field definition, introspection and validation to a model."""

    @classmethod
    def enum_field(cls, accessor: Any, definition: Any, **options: Any) -> FieldSpec:
        return define_enum_field(cls, accessor, definition, **options)

    @classmethod
    def enum_fields(cls) -> dict[str, EnumDefinition]:
        return enum_fields(cls)

    @classmethod
    def enum_field_for(cls, accessor: Any) -> EnumDefinition | None:
        return enum_field_for(cls, accessor)

    @classmethod
    def has_enum_field(cls, accessor: Any) -> bool:
        return has_enum_field(cls, accessor)

    @classmethod
    def belongs_to(cls, name: str, *, polymorphic: bool = False) -> Association:
        """Declare a belongs-to relation; polymorphic ones drive type validation."""
        descriptor = BelongsTo(name, polymorphic=polymorphic)
        setattr(cls, name, descriptor)
        return descriptor.association

    @classmethod
    def reflect_on_associations(cls) -> list[Association]:
        return [
            attribute.association
            for klass in reversed(cls.__mro__)
            for attribute in vars(klass).values()
            if isinstance(attribute, BelongsTo)
        ]

    def enum_fields_metadata(self) -> dict[str, Metadata | None]:
        return enum_fields_metadata(self)

    @property
    def errors(self) -> Errors:
        errors = self.__dict__.get(_ERRORS_ATTR)
        if errors is None:
            errors = self.__dict__[_ERRORS_ATTR] = Errors()
        return errors

    def is_valid(self) -> bool:
        """Run enum field validations, refilling self.errors."""
        errors = self.errors
        errors.clear()
        run_validations(self, errors)
        return not errors
