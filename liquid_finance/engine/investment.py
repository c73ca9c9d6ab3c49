"""
Investment Simulator

Compound growth of a lump sum plus a monthly contribution at a fixed
annual rate compounded monthly. Contributions are added at the start of
each month, before that month's interest.
"""

from liquid_finance.models.simulation import InvestmentParams, InvestmentSnapshot
from liquid_finance.validation.checks import (
    InvalidInputError,
    Number,
    require_finite,
)


def simulate(
    principal: Number,
    monthly_contribution: Number,
    annual_rate_percent: Number,
    years: int,
) -> list[InvestmentSnapshot]:
    """
    Simulate the investment year by year.

    Year 0 is the untouched principal. The principal counts as
    contributed money, so interest starts at exactly zero. Zero or
    negative rates and contributions are accepted and simply shrink or
    flatten the curve. A negative horizon yields the year-0 snapshot only.

    Returns:
        max(years, 0) + 1 snapshots in chronological order
    """
    require_finite("principal", principal)
    require_finite("monthly_contribution", monthly_contribution)
    require_finite("annual_rate_percent", annual_rate_percent)
    if isinstance(years, bool) or not isinstance(years, int):
        raise InvalidInputError("years", years, "must be a whole number of years")

    contribution = float(monthly_contribution)
    monthly_growth = 1 + float(annual_rate_percent) / 100 / 12

    balance = float(principal)
    contributed = float(principal)
    horizon = max(years, 0)
    snapshots = []

    for year in range(horizon + 1):
        snapshots.append(InvestmentSnapshot(
            period_label=f"Year {year}",
            balance=balance,
            total_contributed=contributed,
        ))
        if year == horizon:
            break
        for _ in range(12):
            balance = (balance + contribution) * monthly_growth
            contributed += contribution

    return snapshots


def simulate_params(params: InvestmentParams) -> list[InvestmentSnapshot]:
    """Run `simulate` on a parameter set, e.g. one suggested by the advice service."""
    return simulate(
        params.principal,
        params.monthly_contribution,
        params.annual_rate_percent,
        params.years,
    )
