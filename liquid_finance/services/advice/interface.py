"""
Investment Advice Collaborator

DESIGN DECISION: Free-text investment advice comes from an external
language model service that lives outside this package. We only define
the boundary:

- CAN: Suggest simulator parameters and explain them
- CANNOT: Change simulator inputs when it fails

The investment simulator never knows this collaborator exists. It only
ever receives explicit numbers, either the user's own or a suggestion
that arrived intact.
"""

from abc import ABC, abstractmethod
from typing import Optional

from pydantic import BaseModel, Field

from liquid_finance.models.ledger import Transaction
from liquid_finance.models.profile import Profile
from liquid_finance.models.simulation import InvestmentParams

ADVICE_FALLBACK_MESSAGE = (
    "### Error\n"
    "I couldn't process that request.\n\n"
    "### Troubleshooting\n"
    "* Check your connection.\n"
    "* Try a simpler prompt."
)


class InvestmentAdvice(BaseModel):
    """A suggested simulation plus the explanation shown to the user."""

    explanation: str = Field(..., min_length=1)
    params: Optional[InvestmentParams] = Field(
        default=None,
        description="Suggested simulator inputs, None when nothing usable came back"
    )


class AdviceError(Exception):
    """The advice service failed or returned something unusable."""
    pass


class AdviceProvider(ABC):
    """Abstract interface for the external advice service."""

    @abstractmethod
    async def suggest_investment(
        self,
        prompt: str,
        profile: Profile,
        transactions: list[Transaction],
    ) -> InvestmentAdvice:
        """
        Turn a free-text investment idea into simulator parameters.

        Raises:
            AdviceError: If the service fails
        """
        pass
