"""
Profile Models

The user's calibration anchor (base balance), income, budget state and
an optional scheduled change of income.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from liquid_finance.models.budget import BudgetRatios, BudgetState


class FutureIncomeEvent(BaseModel):
    """
    A one-time step change of monthly income, e.g. intern to full time.

    At most one pending event is modelled.
    """
    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        allow_inf_nan=False,
    )

    enabled: bool = False
    new_monthly_income: float = Field(default=0.0, ge=0)
    months_until_start: int = Field(default=0, ge=0)
    description: str = Field(default="", max_length=200)


class Profile(BaseModel):
    """
    Everything the engine needs to know about the user.

    `base_balance` excludes every recorded transaction. The actual
    balance is base + net transaction sum, so recalibrating to a real
    bank balance only ever rewrites this one field. It may go negative.
    """
    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        allow_inf_nan=False,
    )

    name: str = Field(default="", max_length=100)
    currency: str = Field(default="INR", min_length=3, max_length=3)
    savings_goal: Decimal = Field(default=Decimal("0"), ge=0)
    is_setup: bool = False

    base_balance: Decimal = Field(
        default=Decimal("0"),
        description="Balance excluding transaction effects"
    )
    monthly_income: float = Field(
        default=0.0,
        ge=0,
        description="Current monthly take-home income"
    )
    budget: BudgetState
    future_income: FutureIncomeEvent = Field(default_factory=FutureIncomeEvent)

    @classmethod
    def default(cls) -> "Profile":
        """Profile used before the user has completed setup."""
        return cls(
            budget=BudgetState(
                ratios=BudgetRatios(
                    needs_percent=50,
                    wants_percent=30,
                    savings_percent=20,
                ),
                monthly_limit=30000,
            ),
        )
