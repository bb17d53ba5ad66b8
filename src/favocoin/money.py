"""Utilities for working with favocoin amounts.

Amounts are exact rationals so that a price split across any number of
participants always sums back to the original price. Rounding happens only
when an amount is rendered for display.
"""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from fractions import Fraction
from typing import Union

ZERO = Fraction(0)
CENT = Decimal("0.01")

AmountLike = Union[Fraction, Decimal, int, float, str]


def to_amount(value: AmountLike) -> Fraction:
    """Convert ``value`` to an exact :class:`~fractions.Fraction`."""

    if isinstance(value, bool):
        raise TypeError("Boolean values are not amounts.")
    if isinstance(value, Fraction):
        return value
    if isinstance(value, (int, Decimal)):
        return Fraction(value)
    if isinstance(value, float):
        # Go through ``str`` so 0.1 means one tenth rather than its binary expansion.
        return Fraction(str(value))
    if isinstance(value, str):
        return Fraction(value.strip())
    raise TypeError(f"Unsupported amount type: {type(value)!r}")


def require_non_negative(amount: Fraction, *, field: str = "amount") -> Fraction:
    """Ensure ``amount`` is zero or greater."""

    if amount < ZERO:
        raise ValueError(f"{field} must be zero or greater.")
    return amount


def round_for_display(amount: Fraction) -> Decimal:
    """Return ``amount`` rounded to two decimals for presentation only."""

    exact = Decimal(amount.numerator) / Decimal(amount.denominator)
    return exact.quantize(CENT, rounding=ROUND_HALF_UP)


def format_coins(amount: Fraction) -> str:
    """Return ``amount`` as a favocoin string (e.g. ``12.50 FVC``)."""

    return f"{round_for_display(amount):,.2f} FVC"
