"""
Budget Allocator

Target amounts per bucket, the derived spending ceiling and the adaptive
feedback loop that nudges both from how the user feels about the budget.

FEEDBACK LOOP:
- TOO_STRICT: move 3 points from savings to wants, raise the limit 5%
- TOO_EASY:   move 2 points from wants to savings, lower the limit 5%
- GOOD:       nothing changes

The percent shift is guarded so no bucket leaves [0, 100]. The limit
adjustment still applies when the guard blocks the shift, unless the
caller asks for strict guards.
"""

import math
from datetime import datetime

from liquid_finance.models.budget import (
    Allocation,
    BudgetRatios,
    BudgetState,
    Sentiment,
)
from liquid_finance.models.ledger import BudgetBucket
from liquid_finance.validation.checks import (
    InvalidInputError,
    Number,
    clamp_percent,
    require_finite,
    require_non_negative,
    require_percent,
)

RELAX_SHIFT = 3
RELAX_FACTOR = 1.05
TIGHTEN_SHIFT = 2
TIGHTEN_FACTOR = 0.95

NO_CHANGE_MESSAGE = "No changes needed"


def allocate(base_balance: Number, ratios: BudgetRatios) -> Allocation:
    """Split a balance by percentage. No rounding; display precision is the caller's."""
    require_finite("base_balance", base_balance)
    base = float(base_balance)
    return Allocation(
        needs_amount=base * ratios.needs_percent / 100,
        wants_amount=base * ratios.wants_percent / 100,
        savings_amount=base * ratios.savings_percent / 100,
    )


def derive_limit(balance: Number, needs_percent: int, wants_percent: int) -> int:
    """
    Spending ceiling: the needs + wants share of the balance, floored.

    Recompute whenever the balance or either percentage changes.
    """
    require_finite("balance", balance)
    require_percent("needs_percent", needs_percent)
    require_percent("wants_percent", wants_percent)
    return math.floor(float(balance) * (needs_percent + wants_percent) / 100)


def apply_feedback(
    state: BudgetState,
    sentiment: Sentiment,
    now: datetime,
    strict_guards: bool = False,
) -> tuple[BudgetState, str]:
    """
    Adjust ratios and limit from the user's sentiment.

    Args:
        state: Current budget state (not modified)
        sentiment: How the budget feels to the user
        now: Timestamp stamped on the new state
        strict_guards: When True, a blocked percent shift also blocks
            the limit adjustment

    Returns:
        (new_state, action_description). GOOD returns `state` itself.
    """
    if sentiment == Sentiment.GOOD:
        return state, NO_CHANGE_MESSAGE

    ratios = state.ratios
    wants = ratios.wants_percent
    savings = ratios.savings_percent
    limit = state.monthly_limit

    if sentiment == Sentiment.TOO_STRICT:
        shifted = savings >= RELAX_SHIFT and wants + RELAX_SHIFT <= 100
        if shifted:
            wants += RELAX_SHIFT
            savings -= RELAX_SHIFT
        if shifted or not strict_guards:
            limit = math.floor(limit * RELAX_FACTOR)
        action = f"Relaxed Budget: Wants +{RELAX_SHIFT}%, Limit +5%"
    elif sentiment == Sentiment.TOO_EASY:
        shifted = wants >= TIGHTEN_SHIFT and savings + TIGHTEN_SHIFT <= 100
        if shifted:
            wants -= TIGHTEN_SHIFT
            savings += TIGHTEN_SHIFT
        if shifted or not strict_guards:
            limit = math.floor(limit * TIGHTEN_FACTOR)
        action = f"Tightened Budget: Savings +{TIGHTEN_SHIFT}%, Limit -5%"
    else:
        raise InvalidInputError("sentiment", sentiment, "is not a known sentiment")

    new_state = state.model_copy(update={
        "ratios": BudgetRatios(
            needs_percent=ratios.needs_percent,
            wants_percent=wants,
            savings_percent=savings,
        ),
        "monthly_limit": limit,
        "last_feedback_at": now,
    })
    return new_state, action


def rebalance_ratios(
    ratios: BudgetRatios,
    bucket: BudgetBucket,
    value: int,
) -> BudgetRatios:
    """
    Apply an edit of the needs or wants percentage, keeping the sum at 100.

    The edited value is clamped into [0, 100]. Savings absorbs the change;
    once savings reaches zero the other spending bucket gives way.
    """
    value = clamp_percent(value)
    needs = ratios.needs_percent
    wants = ratios.wants_percent

    if bucket == BudgetBucket.NEEDS:
        needs = value
        savings = max(0, 100 - needs - wants)
        if needs + wants > 100:
            wants = 100 - needs
            savings = 0
    elif bucket == BudgetBucket.WANTS:
        wants = value
        savings = max(0, 100 - needs - wants)
        if needs + wants > 100:
            needs = 100 - wants
            savings = 0
    else:
        raise InvalidInputError("bucket", bucket, "only needs or wants can be edited")

    return BudgetRatios(
        needs_percent=needs,
        wants_percent=wants,
        savings_percent=savings,
    )


def budget_health(total_spent: Number, monthly_limit: Number) -> float:
    """Percentage of the limit already spent, capped at 100."""
    require_non_negative("total_spent", total_spent)
    require_finite("monthly_limit", monthly_limit)
    spent = float(total_spent)
    if monthly_limit <= 0:
        return 100.0 if spent > 0 else 0.0
    return min(spent / float(monthly_limit) * 100, 100.0)
