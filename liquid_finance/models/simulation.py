"""
Simulation Models

Yearly snapshots produced by the wealth projector and the investment
simulator, and the parameter set the investment simulator runs on.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field


class ProjectionSnapshot(BaseModel):
    """One yearly data point of a wealth projection, rounded to whole units."""
    model_config = ConfigDict(frozen=True)

    period_label: str
    projected_balance: int
    projected_income: int
    cumulative_saved: int


class InvestmentSnapshot(BaseModel):
    """
    One yearly data point of an investment simulation.

    Interest is always derived from balance and contributions so the
    three figures can never drift apart.
    """
    model_config = ConfigDict(frozen=True)

    period_label: str
    balance: float
    total_contributed: float

    @computed_field
    @property
    def interest_earned(self) -> float:
        return self.balance - self.total_contributed


class InvestmentParams(BaseModel):
    """Inputs of a compound interest simulation."""
    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        allow_inf_nan=False,
    )

    principal: float = Field(default=100000.0, description="Initial lump sum")
    monthly_contribution: float = Field(default=15000.0, description="Monthly SIP")
    annual_rate_percent: float = Field(default=12.0, description="Annual rate in percent")
    years: int = Field(default=5, description="Duration in years")
    name: Optional[str] = Field(default=None, max_length=100)
