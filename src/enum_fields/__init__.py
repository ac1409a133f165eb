"""enum-fields: enum-like fields for model classes.

One declarative definition per field yields value/label accessors,
metadata lookup, predicates, query scopes and validation.
"""

from enum_fields.definition import EnumDefinition, normalize_key
from enum_fields.errors import EnumFieldsError, InvalidDefinitionsError, MissingDefinitionsError
from enum_fields.field import EnumField, FieldOptions, FieldSpec, define_enum_field
from enum_fields.host import Association, HostCapability, ModelHost
from enum_fields.model import (
    EnumFieldsMixin,
    enum_field_for,
    enum_fields,
    enum_fields_metadata,
    has_enum_field,
)
from enum_fields.registry import Registry, get_registry, model_key, register, reset_registry
from enum_fields.validation import Errors, run_validations

__version__ = "0.1.0"

__all__ = [
    "Association",
    "EnumDefinition",
    "EnumField",
    "EnumFieldsError",
    "EnumFieldsMixin",
    "Errors",
    "FieldOptions",
    "FieldSpec",
    "HostCapability",
    "InvalidDefinitionsError",
    "MissingDefinitionsError",
    "ModelHost",
    "Registry",
    "__version__",
    "define_enum_field",
    "enum_field_for",
    "enum_fields",
    "enum_fields_metadata",
    "get_registry",
    "has_enum_field",
    "model_key",
    "normalize_key",
    "register",
    "reset_registry",
    "run_validations",
]
