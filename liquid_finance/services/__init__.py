"""Services package."""

from liquid_finance.services.advice import (
    ADVICE_FALLBACK_MESSAGE,
    AdviceError,
    AdviceProvider,
    InvestmentAdvice,
)
from liquid_finance.services.storage import (
    AuditStorageInterface,
    DuplicateError,
    FinanceStorageInterface,
    InMemoryAuditStorage,
    InMemoryFinanceStorage,
    StorageError,
)

__all__ = [
    # Advice collaborator
    "ADVICE_FALLBACK_MESSAGE",
    "AdviceError",
    "AdviceProvider",
    "InvestmentAdvice",
    # Storage services
    "AuditStorageInterface",
    "DuplicateError",
    "FinanceStorageInterface",
    "InMemoryAuditStorage",
    "InMemoryFinanceStorage",
    "StorageError",
]
