"""
Value -- the closed variant every public operation accepts and returns.

    Value = Integer | Amount | Balance

Integer is any bare Python rational (``int``, ``Decimal``, ``Fraction``).
It has no commodity and no precision field; its precision is the natural
number of fractional digits needed to write it, capped at the configured
extra precision whenever it meets an Amount.

This module also owns the two numeric primitives the rest of the kernel
shares: exact conversion to ``Fraction`` and half-away-from-zero rounding
of a ``Fraction`` to a fixed number of decimal places.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from fractions import Fraction
from typing import TYPE_CHECKING, Union

from commodity_kernel.config import get_precision_settings

if TYPE_CHECKING:
    from commodity_kernel.domain.amount import Amount
    from commodity_kernel.domain.balance import Balance

Integer = Union[int, Decimal, Fraction]
Value = Union[int, Decimal, Fraction, "Amount", "Balance"]


class ValueKind(str, Enum):
    """Tag of the Value variant."""

    INTEGER = "integer"
    AMOUNT = "amount"
    BALANCE = "balance"


def kind_of(value: object) -> ValueKind:
    """
    Classify ``value``.

    Raises:
        TypeError: for anything outside the variant (floats and bools
            included; floats are never accepted as quantities).
    """
    from commodity_kernel.domain.amount import Amount
    from commodity_kernel.domain.balance import Balance

    if isinstance(value, Amount):
        return ValueKind.AMOUNT
    if isinstance(value, Balance):
        return ValueKind.BALANCE
    if is_integer(value):
        return ValueKind.INTEGER
    raise TypeError(f"Not a value: {value!r} ({type(value).__name__})")


def is_integer(value: object) -> bool:
    """True for bare rationals usable as the Integer variant."""
    if isinstance(value, bool):
        return False
    if isinstance(value, Decimal):
        return value.is_finite()
    return isinstance(value, (int, Fraction))


def to_fraction(value: Integer) -> Fraction:
    """Exact rational form of an Integer."""
    return value if isinstance(value, Fraction) else Fraction(value)


def normalize_integer(quantity: Fraction) -> int | Fraction:
    """Collapse an integral Fraction to ``int``."""
    if quantity.denominator == 1:
        return quantity.numerator
    return quantity


def natural_precision(value: Integer) -> int | None:
    """
    Fractional digits needed to write ``value`` exactly.

    Returns None when the decimal expansion does not terminate.
    """
    if isinstance(value, int):
        return 0
    if isinstance(value, Decimal):
        return max(0, -value.as_tuple().exponent)

    denominator = value.denominator
    twos = fives = 0
    while denominator % 2 == 0:
        denominator //= 2
        twos += 1
    while denominator % 5 == 0:
        denominator //= 5
        fives += 1
    if denominator != 1:
        return None
    return max(twos, fives)


def integer_precision(value: Integer) -> int:
    """Precision an Integer contributes when combined with an Amount."""
    extra = get_precision_settings().extra_precision
    natural = natural_precision(value)
    if natural is None:
        return extra
    return min(natural, extra)


def round_quantity(quantity: Fraction, places: int) -> Decimal:
    """
    Round ``quantity`` half away from zero to exactly ``places`` digits.

    Computed with integer arithmetic so no decimal context precision is
    involved; the result carries exponent ``-places``.
    """
    scaled = quantity * (10 ** places)
    negative = scaled < 0
    whole, remainder = divmod(abs(scaled.numerator), scaled.denominator)
    if 2 * remainder >= scaled.denominator:
        whole += 1
    digits = tuple(int(ch) for ch in str(whole))
    return Decimal((1 if negative and whole else 0, digits, -places))
