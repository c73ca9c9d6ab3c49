"""
Wealth Projector

Month-by-month simulation of savings accumulation over a fixed horizon,
with a one-time income step and annual raises, sampled once a year.
"""

import math

from liquid_finance.models.profile import Profile
from liquid_finance.models.simulation import ProjectionSnapshot
from liquid_finance.validation.checks import (
    InvalidInputError,
    require_finite,
)

DEFAULT_MONTHS = 120
DEFAULT_ANNUAL_HIKE_PERCENT = 10.0


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def project(
    profile: Profile,
    months: int = DEFAULT_MONTHS,
    annual_hike_percent: float = DEFAULT_ANNUAL_HIKE_PERCENT,
) -> list[ProjectionSnapshot]:
    """
    Project net worth from the profile's savings rate.

    For every month i in 0..months (inclusive):
    1. the scheduled income event fires when i == months_until_start
    2. a raise applies on every anniversary (i > 0, i % 12 == 0)
    3. savings_percent of the month's income is saved
    4. a snapshot is taken on every anniversary, including month 0

    Returns:
        months // 12 + 1 snapshots in chronological order
    """
    if isinstance(months, bool) or not isinstance(months, int) or months < 0:
        raise InvalidInputError("months", months, "must be a non-negative integer")
    require_finite("annual_hike_percent", annual_hike_percent)

    event = profile.future_income
    savings_rate = profile.budget.ratios.savings_percent / 100
    hike = 1 + annual_hike_percent / 100

    balance = float(profile.base_balance)
    income = profile.monthly_income
    saved = 0.0
    snapshots = []

    for i in range(months + 1):
        if event.enabled and i == event.months_until_start:
            income = event.new_monthly_income

        if i > 0 and i % 12 == 0:
            income *= hike

        monthly_savings = income * savings_rate
        balance += monthly_savings
        saved += monthly_savings

        if i % 12 == 0:
            snapshots.append(ProjectionSnapshot(
                period_label=f"Year {i // 12}",
                projected_balance=_round_half_up(balance),
                projected_income=_round_half_up(income),
                cumulative_saved=_round_half_up(saved),
            ))

    return snapshots
