"""Configuration package."""

from expense_tracker.config.settings import (
    AppSettings,
    ReportSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "ReportSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
