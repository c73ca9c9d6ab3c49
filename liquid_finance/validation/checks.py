"""
Boundary Checks

Small guards the engine runs on its numeric inputs before calculating.

DESIGN DECISION: A calculation never turns garbage into a number.
NaN, infinity, negative amounts and out-of-range percentages are
rejected synchronously with a message naming the offending argument.
"""

import math
from decimal import Decimal, InvalidOperation
from typing import Union

Number = Union[int, float, Decimal]


class InvalidInputError(ValueError):
    """An engine argument is outside the domain the calculation accepts."""

    def __init__(self, argument: str, value: object, reason: str):
        self.argument = argument
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {argument}={value!r}: {reason}")


def require_finite(argument: str, value: Number) -> None:
    """Reject NaN, infinities and anything that is not a number."""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise InvalidInputError(argument, value, "must be a number")
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise InvalidInputError(argument, value, "must be finite")
    elif isinstance(value, float) and not math.isfinite(value):
        raise InvalidInputError(argument, value, "must be finite")


def require_non_negative(argument: str, value: Number) -> None:
    require_finite(argument, value)
    if value < 0:
        raise InvalidInputError(argument, value, "must not be negative")


def require_percent(argument: str, value: Number) -> None:
    require_finite(argument, value)
    if value < 0 or value > 100:
        raise InvalidInputError(argument, value, "must be between 0 and 100")


def clamp_percent(value: int) -> int:
    """Pin an edited percentage into [0, 100]."""
    return max(0, min(100, value))


def to_decimal(argument: str, value: Number) -> Decimal:
    """
    Convert a number to Decimal through its string form.

    Going through str() keeps 0.1 as Decimal("0.1") rather than the
    binary expansion of the float.
    """
    require_finite(argument, value)
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise InvalidInputError(argument, value, "is not a decimal number") from e
