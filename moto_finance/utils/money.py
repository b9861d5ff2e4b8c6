"""Decimal money helpers"""

from decimal import Decimal, ROUND_CEILING
from typing import Union

Number = Union[Decimal, int, float, str]

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value: Number | None) -> Decimal:
    """
    Convert an int, float, str or Decimal into a Decimal.

    Floats go through their string form so 0.1 becomes Decimal("0.1")
    instead of its binary expansion. None is treated as zero.
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def ceil_amount(value: Number) -> Decimal:
    """Round up to the next whole currency unit (never down, never to nearest)"""
    rounded = to_decimal(value).to_integral_value(rounding=ROUND_CEILING)
    # -0 shows up when ceiling a small negative value
    return rounded if rounded != ZERO else ZERO
