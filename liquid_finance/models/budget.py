"""
Budget Models

The needs/wants/savings split, the spending ceiling derived from it,
and the user sentiment that drives the feedback loop.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from liquid_finance.models.ledger import BucketSpending


class Sentiment(str, Enum):
    """How the user feels about the current budget."""
    TOO_STRICT = "too_strict"
    GOOD = "good"
    TOO_EASY = "too_easy"


class BudgetRatios(BaseModel):
    """
    Percentages of the reference balance assigned to each bucket.

    The model does not force the three to sum to 100. Callers keep
    them summing to 100 and the feedback loop preserves the sum.
    """
    model_config = ConfigDict(frozen=True)

    needs_percent: int = Field(..., ge=0, le=100)
    wants_percent: int = Field(..., ge=0, le=100)
    savings_percent: int = Field(..., ge=0, le=100)

    @property
    def total(self) -> int:
        return self.needs_percent + self.wants_percent + self.savings_percent

    @property
    def spendable_percent(self) -> int:
        """Share of the balance that is safe to spend (needs + wants)."""
        return self.needs_percent + self.wants_percent


class BudgetState(BaseModel):
    """Ratios plus the spending ceiling the feedback loop adjusts."""
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    ratios: BudgetRatios
    monthly_limit: int = Field(
        ...,
        ge=0,
        description="Derived monthly spending ceiling"
    )
    recurring_expenses: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Fixed monthly outgoings such as rent"
    )
    last_feedback_at: Optional[datetime] = Field(
        default=None,
        description="When feedback last changed this state"
    )


class Allocation(BaseModel):
    """Target amount for each bucket."""
    model_config = ConfigDict(frozen=True)

    needs_amount: float
    wants_amount: float
    savings_amount: float

    @computed_field
    @property
    def total(self) -> float:
        return self.needs_amount + self.wants_amount + self.savings_amount


class BudgetOverview(BaseModel):
    """Targets next to actual spending for one month."""
    model_config = ConfigDict(frozen=True)

    allocation: Allocation
    spending: BucketSpending
    monthly_limit: int
    health_percent: float = Field(
        ...,
        ge=0,
        le=100,
        description="Share of the limit already spent, capped at 100"
    )

    @computed_field
    @property
    def remaining_limit(self) -> Decimal:
        """Money left under the limit; negative once it is overspent."""
        return Decimal(self.monthly_limit) - self.spending.total_spent
