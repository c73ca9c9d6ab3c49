"""
Tax Models

A versioned, fixed slab table for the take-home estimator and the
breakdown it produces.

DESIGN DECISION: The policy is data, not code. A new financial year is a
new TaxPolicy instance, the estimator itself does not change.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TaxSlab(BaseModel):
    """Income band [floor, ceiling) taxed at a flat rate."""
    model_config = ConfigDict(frozen=True)

    floor: Decimal = Field(..., ge=0)
    ceiling: Optional[Decimal] = Field(
        default=None,
        description="Upper bound of the band, None for the top slab"
    )
    rate: Decimal = Field(..., ge=0, le=1)

    @model_validator(mode='after')
    def validate_band(self) -> 'TaxSlab':
        if self.ceiling is not None and self.ceiling <= self.floor:
            raise ValueError("Slab ceiling must be above its floor")
        return self


class TaxPolicy(BaseModel):
    """All constants of the take-home formula."""
    model_config = ConfigDict(frozen=True)

    version: str
    standard_deduction: Decimal = Field(..., ge=0)
    slabs: tuple[TaxSlab, ...]
    cess_rate: Decimal = Field(..., ge=0)
    basic_pay_share: Decimal = Field(
        ...,
        ge=0,
        le=1,
        description="Basic pay as a share of fixed pay"
    )
    provident_fund_rate: Decimal = Field(
        ...,
        ge=0,
        le=1,
        description="PF contribution as a share of basic pay"
    )
    professional_tax: Decimal = Field(
        ...,
        ge=0,
        description="Flat annual professional tax"
    )

    @model_validator(mode='after')
    def validate_slabs(self) -> 'TaxPolicy':
        """Slabs must be contiguous, start at zero and end unbounded."""
        if not self.slabs:
            raise ValueError("A tax policy needs at least one slab")
        if self.slabs[0].floor != 0:
            raise ValueError("The first slab must start at zero")
        for lower, upper in zip(self.slabs, self.slabs[1:]):
            if lower.ceiling != upper.floor:
                raise ValueError(
                    f"Slabs are not contiguous at {lower.ceiling} / {upper.floor}"
                )
        if self.slabs[-1].ceiling is not None:
            raise ValueError("The last slab must be unbounded")
        return self


class NetIncomeBreakdown(BaseModel):
    """Every step of the take-home estimate, annual figures unless noted."""
    model_config = ConfigDict(frozen=True)

    policy_version: str
    annual_fixed_pay: Decimal
    taxable_income: Decimal
    income_tax: Decimal = Field(..., description="Slab tax including cess")
    provident_fund: Decimal
    professional_tax: Decimal
    annual_net: Decimal
    monthly_net: int
