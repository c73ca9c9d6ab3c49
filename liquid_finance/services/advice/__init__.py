"""Investment advice collaborator package."""

from liquid_finance.services.advice.interface import (
    ADVICE_FALLBACK_MESSAGE,
    AdviceError,
    AdviceProvider,
    InvestmentAdvice,
)

__all__ = [
    "ADVICE_FALLBACK_MESSAGE",
    "AdviceError",
    "AdviceProvider",
    "InvestmentAdvice",
]
