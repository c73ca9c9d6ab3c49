"""
Ledger Data Models

These models describe the raw money movements the user records and the
totals the ledger aggregator folds them into.

DESIGN DECISION: Transaction kinds and categories are closed enums.
Grouping by category and mapping categories onto needs/wants/savings
must be exhaustive, which free-text tags cannot guarantee.

Transactions are immutable once created. The core only ever appends them.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, computed_field


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """
    Direction of a money movement.

    INVESTMENT leaves the liquid balance exactly like an expense,
    but is tracked apart from expense categories.
    """
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"
    INVESTMENT = "INVESTMENT"


class Category(str, Enum):
    """Supported transaction categories."""
    SALARY = "Salary/Credit"
    FREELANCE = "Freelance"
    FOOD = "Food & Dining"
    TRANSPORT = "Transport"
    HOUSING = "Housing"
    UTILITIES = "Utilities"
    ENTERTAINMENT = "Entertainment"
    SHOPPING = "Shopping"
    HEALTH = "Health"
    INVESTMENT = "Investment"
    SAVINGS = "Savings"
    OTHER = "Other"


class BudgetBucket(str, Enum):
    """The three-way budget partition."""
    NEEDS = "needs"
    WANTS = "wants"
    SAVINGS = "savings"


# Every category belongs to exactly one bucket.
# Income categories are filed under savings so the map stays total.
CATEGORY_BUCKETS: dict[Category, BudgetBucket] = {
    Category.HOUSING: BudgetBucket.NEEDS,
    Category.TRANSPORT: BudgetBucket.NEEDS,
    Category.UTILITIES: BudgetBucket.NEEDS,
    Category.HEALTH: BudgetBucket.NEEDS,
    Category.FOOD: BudgetBucket.NEEDS,
    Category.SALARY: BudgetBucket.SAVINGS,
    Category.FREELANCE: BudgetBucket.SAVINGS,
    Category.ENTERTAINMENT: BudgetBucket.WANTS,
    Category.SHOPPING: BudgetBucket.WANTS,
    Category.OTHER: BudgetBucket.WANTS,
    Category.INVESTMENT: BudgetBucket.SAVINGS,
    Category.SAVINGS: BudgetBucket.SAVINGS,
}


# =============================================================================
# TRANSACTION
# =============================================================================

class Transaction(BaseModel):
    """
    A single recorded money movement.

    Amounts are always non-negative; the direction comes from `kind`.
    """
    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        allow_inf_nan=False,
    )

    id: str = Field(
        default_factory=lambda: uuid4().hex,
        min_length=1,
        description="Opaque unique identifier"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        decimal_places=2,
        description="Amount in the profile currency"
    )
    kind: TransactionType = Field(
        ...,
        description="Income, expense or investment"
    )
    category: Category = Field(
        ...,
        description="Category tag"
    )
    timestamp: datetime = Field(
        ...,
        description="When the transaction happened"
    )
    note: Optional[str] = Field(
        default=None,
        max_length=500,
        description="Free text note"
    )

    @property
    def is_outflow(self) -> bool:
        """Expenses and investments both leave the liquid balance."""
        return self.kind in (TransactionType.EXPENSE, TransactionType.INVESTMENT)

    @property
    def signed_amount(self) -> Decimal:
        return -self.amount if self.is_outflow else self.amount


# =============================================================================
# AGGREGATES
# =============================================================================

class CategoryTotal(BaseModel):
    """Expense total for one category, or for the merged remainder."""
    model_config = ConfigDict(frozen=True)

    label: str
    category: Optional[Category] = Field(
        default=None,
        description="None for the merged 'Other' bucket"
    )
    total: Decimal


class LedgerSummary(BaseModel):
    """Balance and period totals folded from a transaction collection."""
    model_config = ConfigDict(frozen=True)

    current_balance: Decimal
    monthly_income_actual: Decimal
    monthly_expense_actual: Decimal
    expense_by_category: list[CategoryTotal] = Field(default_factory=list)


class BucketSpending(BaseModel):
    """Actual spending for a month split into needs, wants and savings."""
    model_config = ConfigDict(frozen=True)

    needs: Decimal = Decimal("0")
    wants: Decimal = Decimal("0")
    savings: Decimal = Decimal("0")

    @computed_field
    @property
    def total_spent(self) -> Decimal:
        """Money spent, i.e. needs plus wants. Savings are not spending."""
        return self.needs + self.wants
