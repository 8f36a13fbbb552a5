"""Application configuration using pydantic-settings."""

from typing import Any

from pydantic import ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    DATABASE_URL: str = "sqlite:///./preferences.db"

    # Preference store overrides (empty means "not set")
    MODEL_PREFERENCE_TABLE: str = ""
    MODEL_PREFERENCE_HIDDEN_ATTRIBUTES: str = ""  # comma-separated, e.g. "foo,bar"

    @field_validator("LOG_LEVEL", "PREFERENCE_LOG_LEVEL", mode="before")
    @classmethod
    def validate_log_level(cls, v: str, info: ValidationInfo) -> str:
        """Validate and normalize a log level to an uppercase Python logging level."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"{info.field_name} must be one of {valid}, got {v!r}")
        return v.upper()

    # App settings
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    # Level for the preference write log (created/updated/cleared)
    PREFERENCE_LOG_LEVEL: str = "INFO"


settings = Settings()


# Runtime overrides for the preference store. These win over the environment
# settings above; see models.preference.get_qualified_table_name().
preference_config: dict[str, Any] = {}


def configure_preferences(
    table: str | None = None, hidden_attributes: list[str] | None = None
) -> None:
    """Set runtime overrides for the preference table and hidden attributes.

    The table name is bound when ``models.preference`` is imported, so a
    ``table`` override must be configured before that import.
    """
    if table is not None:
        preference_config["table"] = table
    if hidden_attributes is not None:
        preference_config["hidden_attributes"] = list(hidden_attributes)


def reset_preference_config() -> None:
    """Drop all runtime preference overrides."""
    preference_config.clear()
