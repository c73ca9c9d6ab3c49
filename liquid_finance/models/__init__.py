"""
Data Models Package

This package contains all Pydantic models used in Liquid Finance.
All data flowing in and out of the engine conforms to these schemas.
"""

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
from liquid_finance.models.budget import (
    Allocation,
    BudgetOverview,
    BudgetRatios,
    BudgetState,
    Sentiment,
)
from liquid_finance.models.profile import (
    FutureIncomeEvent,
    Profile,
)
from liquid_finance.models.simulation import (
    InvestmentParams,
    InvestmentSnapshot,
    ProjectionSnapshot,
)
from liquid_finance.models.tax import (
    NetIncomeBreakdown,
    TaxPolicy,
    TaxSlab,
)
from liquid_finance.models.validation import (
    ValidationIssue,
    ValidationResult,
)
from liquid_finance.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "CATEGORY_BUCKETS",
    "BucketSpending",
    "BudgetBucket",
    "Category",
    "CategoryTotal",
    "LedgerSummary",
    "Transaction",
    "TransactionType",
    # Budget models
    "Allocation",
    "BudgetOverview",
    "BudgetRatios",
    "BudgetState",
    "Sentiment",
    # Profile models
    "FutureIncomeEvent",
    "Profile",
    # Simulation models
    "InvestmentParams",
    "InvestmentSnapshot",
    "ProjectionSnapshot",
    # Tax models
    "NetIncomeBreakdown",
    "TaxPolicy",
    "TaxSlab",
    # Validation models
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
