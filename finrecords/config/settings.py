"""
Configuration Management for Financial Records

Uses pydantic-settings for type-safe configuration from environment variables.

All configuration is centralized here and validated on first access.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ExportSettings(BaseSettings):
    """JSON export configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINRECORDS_EXPORT_",
        extra="ignore"
    )

    indent: int = Field(
        default=2,
        ge=0,
        le=8,
        description="JSON indentation (0 = compact, single line)"
    )
    sort_keys: bool = Field(
        default=False,
        description="Sort object keys in exported JSON"
    )

    @property
    def json_indent(self) -> Optional[int]:
        """Indent argument for json.dumps."""
        return self.indent or None


class AuditSettings(BaseSettings):
    """Audit trail configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINRECORDS_AUDIT_",
        extra="ignore"
    )

    enabled: bool = Field(
        default=True,
        description="Keep an in-memory audit trail"
    )
    max_events: int = Field(
        default=5000,
        ge=10,
        description="Oldest audit events are dropped beyond this count"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Level for the local structured log"
    )

    # Input limits
    max_category_length: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Maximum length of a category label"
    )
    max_notes_length: int = Field(
        default=1000,
        ge=1,
        le=100000,
        description="Maximum length of a record note"
    )

    # Rename behaviour
    rename_touches_updated_at: bool = Field(
        default=False,
        description="Refresh updated_at on records changed by a category rename"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def export(self) -> ExportSettings:
        return ExportSettings()

    @property
    def audit(self) -> AuditSettings:
        return AuditSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, with a
    `<name>_error` entry for every section that failed.
    """
    results = {}

    settings = get_settings()

    for name in ("export", "audit", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
