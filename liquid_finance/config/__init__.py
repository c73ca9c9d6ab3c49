"""Configuration package."""

from liquid_finance.config.settings import (
    AppSettings,
    BudgetSettings,
    InvestmentSettings,
    ProjectionSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "BudgetSettings",
    "InvestmentSettings",
    "ProjectionSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
