"""
Parsing -- reads amount literals from text.

Accepted forms::

    $100.00      $ 100.00     -$1,234.5    $-5
    100.00 EUR   10AAPL       "M&M" 3      200

The symbol may precede (prefixed) or follow the number; whitespace between
them makes the symbol unconnected. Grouping commas are accepted and ignored
for the value. Precision is the count of digits after the decimal point.

New symbols are interned with the placement seen in the literal. Metadata of
an already-known commodity is never changed by parsing.
"""

from __future__ import annotations

import re
from decimal import Decimal

from commodity_kernel.domain.amount import Amount
from commodity_kernel.domain.commodity import CommodityRegistry, CommoditySymbol, get_registry
from commodity_kernel.domain.value import Value
from commodity_kernel.exceptions import AmountParseError

_SYMBOL = r'"[^"]+"|[^\s\d\-+.,"]+'
_NUMBER = r"\d{1,3}(?:,\d{3})+(?:\.\d*)?|\d+(?:\.\d*)?|\.\d+"

_AMOUNT_RE = re.compile(
    rf"""
    ^\s*
    (?P<lead_sign>-)?
    (?:(?P<prefix>{_SYMBOL})(?P<prefix_gap>\s*))?
    (?P<inner_sign>-)?
    (?P<number>{_NUMBER})
    (?:(?P<suffix_gap>\s*)(?P<suffix>{_SYMBOL}))?
    \s*$
    """,
    re.VERBOSE,
)


def _split(text: str) -> tuple[Decimal, CommoditySymbol | None]:
    if not isinstance(text, str):
        raise TypeError(f"Amount text must be str, got {type(text)}")

    match = _AMOUNT_RE.match(text)
    if match is None:
        raise AmountParseError(text, "not an amount literal")
    if match["prefix"] and match["suffix"]:
        raise AmountParseError(text, "symbol on both sides of the number")
    if match["lead_sign"] and match["inner_sign"]:
        raise AmountParseError(text, "more than one sign")
    if match["inner_sign"] and not match["prefix"]:
        raise AmountParseError(text, "misplaced sign")

    negative = bool(match["lead_sign"] or match["inner_sign"])
    digits = match["number"].replace(",", "")
    if digits.endswith("."):
        digits = digits[:-1]
    quantity = Decimal(("-" if negative else "") + digits)

    if match["prefix"]:
        symbol = CommoditySymbol(
            _unquote(match["prefix"]), prefixed=True, connected=not match["prefix_gap"]
        )
    elif match["suffix"]:
        symbol = CommoditySymbol(
            _unquote(match["suffix"]), prefixed=False, connected=not match["suffix_gap"]
        )
    else:
        symbol = None
    return quantity, symbol


def _unquote(symbol: str) -> str:
    if len(symbol) >= 2 and symbol[0] == symbol[-1] == '"':
        return symbol[1:-1]
    return symbol


def _target(registry: CommodityRegistry | None) -> CommodityRegistry:
    # an empty registry is falsy, so compare against None
    return registry if registry is not None else get_registry()


def parse_amount(
    text: str,
    *,
    exact: bool = False,
    registry: CommodityRegistry | None = None,
) -> Amount:
    """
    Parse ``text`` into an Amount (commodity-less for a bare number).

    Raises:
        AmountParseError: if ``text`` is not an amount literal.
    """
    quantity, symbol = _split(text)
    commodity = None
    if symbol is not None:
        commodity = _target(registry).intern(symbol)
    return Amount.of(quantity, commodity, exact=exact)


def parse_value(
    text: str,
    *,
    exact: bool = False,
    registry: CommodityRegistry | None = None,
) -> Value:
    """
    Parse ``text`` into a value: an Integer for a bare number, else an Amount.

    Bare whole numbers become ``int``; bare decimals become ``Decimal`` so
    their natural precision survives.
    """
    quantity, symbol = _split(text)
    if symbol is None:
        if quantity.as_tuple().exponent >= 0:
            return int(quantity)
        return quantity
    commodity = _target(registry).intern(symbol)
    return Amount.of(quantity, commodity, exact=exact)
