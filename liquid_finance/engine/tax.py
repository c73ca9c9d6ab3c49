"""
Net-Income Estimator

Turns gross annual fixed pay into an estimated monthly take-home figure
using one fixed, versioned slab table.

This is a deterministic formula, not a tax-compliance engine:
1. standard deduction
2. progressive slabs, each taxing only its own band
3. flat cess on the tax
4. provident fund on an assumed basic pay share
5. flat professional tax

DESIGN DECISION: The arithmetic runs in Decimal so the published
formula is reproduced exactly and the final floor never lands one
rupee short because of binary rounding.
"""

from decimal import ROUND_FLOOR, Decimal

from liquid_finance.models.tax import NetIncomeBreakdown, TaxPolicy, TaxSlab
from liquid_finance.validation.checks import (
    InvalidInputError,
    Number,
    to_decimal,
)

ZERO = Decimal("0")
MONTHS_PER_YEAR = Decimal("12")

DEFAULT_TAX_POLICY = TaxPolicy(
    version="IN-NEW-REGIME-FY2025-26",
    standard_deduction=Decimal("75000"),
    slabs=(
        TaxSlab(floor=Decimal("0"), ceiling=Decimal("300000"), rate=Decimal("0")),
        TaxSlab(floor=Decimal("300000"), ceiling=Decimal("700000"), rate=Decimal("0.05")),
        TaxSlab(floor=Decimal("700000"), ceiling=Decimal("1000000"), rate=Decimal("0.10")),
        TaxSlab(floor=Decimal("1000000"), ceiling=Decimal("1200000"), rate=Decimal("0.15")),
        TaxSlab(floor=Decimal("1200000"), ceiling=Decimal("1500000"), rate=Decimal("0.20")),
        TaxSlab(floor=Decimal("1500000"), ceiling=None, rate=Decimal("0.30")),
    ),
    cess_rate=Decimal("0.04"),
    basic_pay_share=Decimal("0.40"),
    provident_fund_rate=Decimal("0.12"),
    professional_tax=Decimal("2400"),
)


def slab_tax(taxable_income: Decimal, slabs: tuple[TaxSlab, ...]) -> Decimal:
    """Progressive tax before cess."""
    tax = ZERO
    for slab in slabs:
        if taxable_income <= slab.floor:
            continue
        if slab.ceiling is None:
            portion = taxable_income - slab.floor
        else:
            portion = min(slab.ceiling - slab.floor, taxable_income - slab.floor)
        tax += portion * slab.rate
    return tax


def estimate_net_income(
    annual_fixed_pay: Number,
    policy: TaxPolicy = DEFAULT_TAX_POLICY,
) -> NetIncomeBreakdown:
    """
    Estimate take-home pay with every intermediate figure.

    Args:
        annual_fixed_pay: The fixed/base part of the salary, not total CTC

    Raises:
        InvalidInputError: pay is negative or not a finite number
    """
    pay = to_decimal("annual_fixed_pay", annual_fixed_pay)
    if pay < 0:
        raise InvalidInputError("annual_fixed_pay", annual_fixed_pay, "must not be negative")

    taxable = max(ZERO, pay - policy.standard_deduction)
    tax = slab_tax(taxable, policy.slabs) * (1 + policy.cess_rate)
    provident_fund = pay * policy.basic_pay_share * policy.provident_fund_rate
    annual_net = pay - tax - provident_fund - policy.professional_tax
    monthly = (annual_net / MONTHS_PER_YEAR).to_integral_value(rounding=ROUND_FLOOR)

    return NetIncomeBreakdown(
        policy_version=policy.version,
        annual_fixed_pay=pay,
        taxable_income=taxable,
        income_tax=tax,
        provident_fund=provident_fund,
        professional_tax=policy.professional_tax,
        annual_net=annual_net,
        monthly_net=int(monthly),
    )


def estimate_monthly_net(
    annual_fixed_pay: Number,
    policy: TaxPolicy = DEFAULT_TAX_POLICY,
) -> int:
    """Estimated monthly take-home, floored to a whole unit. May be negative."""
    return estimate_net_income(annual_fixed_pay, policy).monthly_net
