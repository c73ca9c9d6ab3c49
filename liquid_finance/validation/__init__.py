"""Validation package."""

from liquid_finance.validation.checks import (
    InvalidInputError,
    clamp_percent,
    require_finite,
    require_non_negative,
    require_percent,
    to_decimal,
)
from liquid_finance.validation.validator import ProfileValidator

__all__ = [
    "InvalidInputError",
    "ProfileValidator",
    "clamp_percent",
    "require_finite",
    "require_non_negative",
    "require_percent",
    "to_decimal",
]
