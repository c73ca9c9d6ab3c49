"""
Financial Calculation Engine

Pure, synchronous functions. No clock, no settings, no storage, no logging:
every result is a function of the arguments alone.
"""

from liquid_finance.engine.ledger import (
    aggregate,
    calibrate_base_balance,
    daily_expenses,
    expense_by_category,
    net_transaction_sum,
    spending_by_bucket,
)
from liquid_finance.engine.budget import (
    NO_CHANGE_MESSAGE,
    allocate,
    apply_feedback,
    budget_health,
    derive_limit,
    rebalance_ratios,
)
from liquid_finance.engine.projection import project
from liquid_finance.engine.investment import simulate, simulate_params
from liquid_finance.engine.tax import (
    DEFAULT_TAX_POLICY,
    estimate_monthly_net,
    estimate_net_income,
)

__all__ = [
    # Ledger aggregator
    "aggregate",
    "calibrate_base_balance",
    "daily_expenses",
    "expense_by_category",
    "net_transaction_sum",
    "spending_by_bucket",
    # Budget allocator
    "NO_CHANGE_MESSAGE",
    "allocate",
    "apply_feedback",
    "budget_health",
    "derive_limit",
    "rebalance_ratios",
    # Simulators
    "project",
    "simulate",
    "simulate_params",
    # Net-income estimator
    "DEFAULT_TAX_POLICY",
    "estimate_monthly_net",
    "estimate_net_income",
]
