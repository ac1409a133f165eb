"""Configuration settings for enum-fields."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ENUM_FIELDS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Applied when define_enum_field() is called without validate=...
    validate_by_default: bool = True

    # Validation error message; {values} is the comma-joined allowed values
    inclusion_message: str = "must be one of: {values}"

    # A column named "<association><suffix>" is the type column of a
    # polymorphic association
    polymorphic_type_suffix: str = "_type"


settings = Settings()
