"""
Ledger Aggregator

Folds a transaction collection into a balance and period totals.

DESIGN DECISION: Nothing here knows what "now" is. The reference date for
monthly figures is always passed in by the caller so that identical
inputs always produce identical totals.
"""

from collections.abc import Iterable
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Optional, Union

from liquid_finance.models.ledger import (
    CATEGORY_BUCKETS,
    BucketSpending,
    BudgetBucket,
    Category,
    CategoryTotal,
    LedgerSummary,
    Transaction,
    TransactionType,
)
from liquid_finance.validation.checks import (
    InvalidInputError,
    Number,
    to_decimal,
)

ZERO = Decimal("0")
OTHER_LABEL = "Other"


def _same_month(moment: datetime, reference: Union[date, datetime]) -> bool:
    return moment.year == reference.year and moment.month == reference.month


def net_transaction_sum(transactions: Iterable[Transaction]) -> Decimal:
    """Income minus expenses and investments."""
    return sum((t.signed_amount for t in transactions), ZERO)


def expense_by_category(
    transactions: Iterable[Transaction],
    limit: Optional[int] = None,
) -> list[CategoryTotal]:
    """
    Sum expense amounts per category, largest first.

    With a limit, a list longer than the limit keeps the top (limit - 1)
    categories and merges the rest into one "Other" entry, so the result
    never has more than `limit` entries. Ties keep first-seen order.
    """
    if limit is not None and limit < 2:
        raise InvalidInputError("limit", limit, "must be at least 2")

    totals: dict[Category, Decimal] = {}
    for t in transactions:
        if t.kind == TransactionType.EXPENSE:
            totals[t.category] = totals.get(t.category, ZERO) + t.amount

    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    grouped = [
        CategoryTotal(label=category.value, category=category, total=total)
        for category, total in ranked
    ]

    if limit is None or len(grouped) <= limit:
        return grouped

    head = grouped[:limit - 1]
    remainder = sum((entry.total for entry in grouped[limit - 1:]), ZERO)
    return head + [CategoryTotal(label=OTHER_LABEL, category=None, total=remainder)]


def aggregate(
    base_balance: Number,
    transactions: Iterable[Transaction],
    reference: Union[date, datetime],
    category_limit: Optional[int] = None,
) -> LedgerSummary:
    """
    Derive the current balance and this month's totals.

    Args:
        base_balance: Balance excluding every transaction effect
        transactions: Any iterable of transactions, order does not matter
        reference: Any moment inside the month to report on
        category_limit: Optional cap for the category breakdown

    Returns:
        LedgerSummary. An empty collection yields all-zero totals.
    """
    base = to_decimal("base_balance", base_balance)
    txs = list(transactions)

    monthly_income = ZERO
    monthly_expense = ZERO
    for t in txs:
        if not _same_month(t.timestamp, reference):
            continue
        if t.kind == TransactionType.INCOME:
            monthly_income += t.amount
        elif t.kind == TransactionType.EXPENSE:
            monthly_expense += t.amount

    return LedgerSummary(
        current_balance=base + net_transaction_sum(txs),
        monthly_income_actual=monthly_income,
        monthly_expense_actual=monthly_expense,
        expense_by_category=expense_by_category(txs, category_limit),
    )


def spending_by_bucket(
    transactions: Iterable[Transaction],
    reference: Union[date, datetime],
) -> BucketSpending:
    """
    Split the reference month's outgoings into needs, wants and savings.

    Expenses go to the bucket of their category. Investments, and anything
    filed under the Savings category, count as savings.
    """
    needs = ZERO
    wants = ZERO
    savings = ZERO

    for t in transactions:
        if not _same_month(t.timestamp, reference):
            continue
        if t.kind == TransactionType.EXPENSE:
            bucket = CATEGORY_BUCKETS[t.category]
            if bucket == BudgetBucket.NEEDS:
                needs += t.amount
            elif bucket == BudgetBucket.WANTS:
                wants += t.amount
        if t.kind == TransactionType.INVESTMENT or t.category == Category.SAVINGS:
            savings += t.amount

    return BucketSpending(needs=needs, wants=wants, savings=savings)


def daily_expenses(
    transactions: Iterable[Transaction],
    reference: Union[date, datetime],
    days: int = 14,
) -> list[tuple[date, Decimal]]:
    """Expense totals for the `days` calendar days ending on `reference`, oldest first."""
    if days < 1:
        raise InvalidInputError("days", days, "must be at least 1")

    end = reference.date() if isinstance(reference, datetime) else reference
    per_day: dict[date, Decimal] = {}
    for t in transactions:
        if t.kind == TransactionType.EXPENSE:
            day = t.timestamp.date()
            per_day[day] = per_day.get(day, ZERO) + t.amount

    window = [end - timedelta(days=offset) for offset in range(days - 1, -1, -1)]
    return [(day, per_day.get(day, ZERO)) for day in window]


def calibrate_base_balance(
    observed_balance: Number,
    transactions: Iterable[Transaction],
) -> Decimal:
    """
    Base balance that makes the derived balance match a real bank balance.

    aggregate(calibrate_base_balance(x, txs), txs, ...).current_balance == x
    """
    observed = to_decimal("observed_balance", observed_balance)
    return observed - net_transaction_sum(transactions)
