"""
Configuration Management for Expense Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Storage location, currency markers, budget thresholds and report layout
are all read once and validated at startup.
"""

import re
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ReportSettings(BaseSettings):
    """PDF report layout configuration."""

    model_config = SettingsConfigDict(
        env_prefix="REPORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    page_size: str = Field(
        default="A4",
        description="Page size for exported reports (A4 or letter)"
    )
    margin_mm: float = Field(
        default=14.0,
        ge=5.0,
        le=40.0,
        description="Page margin in millimetres"
    )
    title: str = Field(
        default="Expense Report",
        min_length=1,
        description="Title printed at the top of every report"
    )

    @field_validator('page_size')
    @classmethod
    def validate_page_size(cls, v: str) -> str:
        """Only the page sizes the exporter knows how to lay out."""
        normalized = v.strip().upper()
        if normalized not in {"A4", "LETTER"}:
            raise ValueError(f"Unsupported page size: {v}. Allowed: A4, letter")
        return normalized


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_TRACKER_",
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
        description="Minimum level for the structured log"
    )

    # Storage
    data_dir: Optional[Path] = Field(
        default=None,
        description="Directory holding the JSON collections (None = in-memory only)"
    )
    expenses_key: str = Field(
        default="expenses",
        min_length=1,
        description="Storage key for the expense collection"
    )
    budgets_key: str = Field(
        default="budgets",
        min_length=1,
        description="Storage key for the budget collection"
    )

    # Currency display (Indian conventions throughout)
    currency_symbol: str = Field(
        default="₹",
        description="Currency glyph used in the UI"
    )
    currency_text_marker: str = Field(
        default="Rs.",
        description="Plain-text currency marker used in exported documents"
    )

    # Budget status tiers (percent of budget spent)
    budget_safe_threshold: float = Field(
        default=50.0,
        ge=0.0,
        description="Spend percentage up to which a budget is 'safe'"
    )
    budget_warning_threshold: float = Field(
        default=80.0,
        ge=0.0,
        description="Spend percentage up to which a budget is 'warning'"
    )

    # Input sanity checks (warnings only, never blocking)
    max_expense_amount_inr: float = Field(
        default=1000000.0,
        gt=0,
        description="Amount above which an expense is flagged for a second look"
    )
    future_date_tolerance_days: int = Field(
        default=0,
        ge=0,
        description="How many days in the future an expense date can be without a warning"
    )

    # Report views
    top_expenses_limit: int = Field(
        default=5,
        ge=1,
        le=50,
        description="How many of the largest expenses to list per month"
    )
    daily_trend_days: int = Field(
        default=15,
        ge=1,
        le=31,
        description="How many recent days the daily trend chart shows"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalise and check the log level name."""
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator('expenses_key', 'budgets_key')
    @classmethod
    def validate_storage_key(cls, v: str) -> str:
        """Keys name files in the data directory: letters, digits, '_', '-' and '.'."""
        if not re.match(r"^[A-Za-z0-9_-][A-Za-z0-9_.-]*$", v):
            raise ValueError(f"Invalid storage key: {v!r}")
        return v

    @model_validator(mode='after')
    def validate_thresholds(self) -> 'AppSettings':
        """The warning tier must start at or after the safe tier."""
        if self.budget_safe_threshold > self.budget_warning_threshold:
            raise ValueError(
                "budget_safe_threshold cannot be greater than budget_warning_threshold"
            )
        return self

    @property
    def uses_file_storage(self) -> bool:
        """Whether collections are persisted to disk."""
        return self.data_dir is not None


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

    # Sub-settings are loaded lazily so a bad report section
    # doesn't stop the stores from loading

    @property
    def app(self) -> AppSettings:
        return AppSettings()

    @property
    def report(self) -> ReportSettings:
        return ReportSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, object]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid} plus
    {setting_name}_error entries for the failing sections.
    Useful for startup checks.
    """
    results: dict[str, object] = {}

    settings = get_settings()

    for name in ("app", "report"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
