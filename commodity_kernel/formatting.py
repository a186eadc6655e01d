"""
Formatting -- renders values as text.

Consumes the core's precision rules and implements none of its own:
an Amount is rounded to ``amount.display_precision`` (or its own
precision in full mode), then decorated with its commodity symbol.
"""

from __future__ import annotations

from decimal import Decimal

from commodity_kernel.config import get_precision_settings
from commodity_kernel.domain.amount import Amount
from commodity_kernel.domain.balance import Balance
from commodity_kernel.domain.value import (
    Value,
    ValueKind,
    integer_precision,
    kind_of,
    round_quantity,
    to_fraction,
)


def _number(quantity: Decimal, thousand_marks: bool) -> str:
    return format(abs(quantity), ",f" if thousand_marks else "f")


def format_amount(amount: Amount, *, full_precision: bool = False) -> str:
    """
    Text form of an Amount, e.g. ``$1,234.50``, ``-10 AAPL``, ``"M&M" 3``.

    The minus sign always leads, ahead of a prefixed symbol.
    """
    places = amount.full_precision if full_precision else amount.display_precision
    quantity = round_quantity(amount.quantity, places)
    sign = "-" if quantity.is_signed() else ""

    commodity = amount.commodity
    if commodity is None:
        return _number_with_sign(quantity)

    number = _number(quantity, commodity.thousand_marks)
    symbol = commodity.symbol
    gap = "" if symbol.connected else " "
    if symbol.prefixed:
        return f"{sign}{symbol.printed}{gap}{number}"
    return f"{sign}{number}{gap}{symbol.printed}"


def format_balance(balance: Balance, *, full_precision: bool = False) -> str:
    """One line per entry, no-commodity entry first, then by symbol name."""
    return "\n".join(
        format_amount(amount, full_precision=full_precision) for amount in balance
    )


def format_integer(value: Value, *, full_precision: bool = False) -> str:
    """Bare number at default display precision, or its own capped precision."""
    if full_precision:
        places = integer_precision(value)
    else:
        places = get_precision_settings().default_display_precision
    return _number_with_sign(round_quantity(to_fraction(value), places))


def _number_with_sign(quantity: Decimal) -> str:
    return ("-" if quantity.is_signed() else "") + _number(quantity, False)


def format_value(value: Value, *, full_precision: bool = False) -> str:
    """Text form of any value."""
    kind = kind_of(value)
    if kind is ValueKind.AMOUNT:
        return format_amount(value, full_precision=full_precision)
    if kind is ValueKind.BALANCE:
        return format_balance(value, full_precision=full_precision)
    return format_integer(value, full_precision=full_precision)
