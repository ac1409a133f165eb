"""Utility modules for enum-fields."""

from enum_fields.utils.inflection import pluralize, underscore

__all__ = [
    "pluralize",
    "underscore",
]
