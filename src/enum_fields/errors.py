"""Errors raised while defining enum fields."""


class EnumFieldsError(Exception):
    """Base class for enum field definition errors."""


class MissingDefinitionsError(EnumFieldsError):
    """The definition argument itself is absent (None or False)."""

    def __init__(self, message: str = "Enum field definitions are required") -> None:
        super().__init__(message)


class InvalidDefinitionsError(EnumFieldsError):
    """The definition is present but is not a valid key -> metadata mapping."""
