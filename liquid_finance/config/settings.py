"""
Configuration Management for Liquid Finance

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here, and only the shell
reads it. Engine functions receive every tunable as an explicit argument,
so the same inputs give the same figures whatever the environment says.
"""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProjectionSettings(BaseSettings):
    """Wealth projection defaults."""

    model_config = SettingsConfigDict(
        env_prefix="PROJECTION_",
        extra="ignore"
    )

    months: int = Field(
        default=120,
        ge=0,
        le=1200,
        description="Projection horizon in months"
    )
    annual_hike_percent: float = Field(
        default=10.0,
        ge=-100.0,
        le=100.0,
        description="Assumed yearly raise in percent"
    )


class BudgetSettings(BaseSettings):
    """Budget allocator defaults and feedback loop behaviour."""

    model_config = SettingsConfigDict(
        env_prefix="BUDGET_",
        extra="ignore"
    )

    default_needs_percent: int = Field(default=50, ge=0, le=100)
    default_wants_percent: int = Field(default=30, ge=0, le=100)
    default_savings_percent: int = Field(default=20, ge=0, le=100)
    default_monthly_limit: int = Field(
        default=30000,
        ge=0,
        description="Spending ceiling before the user calibrates"
    )

    strict_feedback_guards: bool = Field(
        default=False,
        description="Skip the limit change when the ratio shift is blocked"
    )

    category_breakdown_limit: int = Field(
        default=5,
        ge=2,
        description="Entries in the expense breakdown before merging into 'Other'"
    )
    daily_window_days: int = Field(
        default=14,
        ge=1,
        le=366,
        description="Days covered by the daily expense series"
    )
    min_savings_percent: int = Field(
        default=10,
        ge=0,
        le=100,
        description="Savings ratio below which profile validation warns"
    )

    @model_validator(mode='after')
    def validate_default_ratios(self) -> 'BudgetSettings':
        total = (
            self.default_needs_percent
            + self.default_wants_percent
            + self.default_savings_percent
        )
        if total != 100:
            raise ValueError(f"Default budget ratios must sum to 100, got {total}")
        return self


class InvestmentSettings(BaseSettings):
    """Starting inputs of the investment simulator."""

    model_config = SettingsConfigDict(
        env_prefix="INVESTMENT_",
        extra="ignore"
    )

    default_principal: float = Field(default=100000.0, ge=0)
    default_monthly_contribution: float = Field(default=15000.0, ge=0)
    default_annual_rate_percent: float = Field(default=12.0, ge=-100.0, le=100.0)
    default_years: int = Field(default=5, ge=0, le=100)


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
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level written to the local log"
    )
    default_currency: str = Field(
        default="INR",
        min_length=3,
        max_length=3,
    )


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
    def projection(self) -> ProjectionSettings:
        return ProjectionSettings()

    @property
    def budget(self) -> BudgetSettings:
        return BudgetSettings()

    @property
    def investment(self) -> InvestmentSettings:
        return InvestmentSettings()

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


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, with a
    `<name>_error` entry for each failure. Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("projection", "budget", "investment", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
