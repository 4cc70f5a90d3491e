"""Configuration package."""

from finrecords.config.settings import (
    AppSettings,
    AuditSettings,
    ExportSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "AuditSettings",
    "ExportSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
