"""
Predicates -- equality, ordering and sign tests over values.

Two modes:
    display  (default) each side is rounded half away from zero before it
             is compared. Two sides are rounded to the lower of their
             display precisions, so exact equality always implies display
             equality.
    exact    the underlying rational quantities are compared unrounded.

Integers and commodity-less Amounts are compatible with every commodity.
Equality and sign tests never raise. Ordering raises CommodityMismatchError
for two different non-absent commodities and IncomparableValueError for a
Balance holding more than one commodity.
"""

from __future__ import annotations

from fractions import Fraction

from commodity_kernel.config import get_precision_settings
from commodity_kernel.domain.amount import Amount
from commodity_kernel.domain.balance import Balance
from commodity_kernel.domain.value import Value, kind_of, round_quantity, to_fraction
from commodity_kernel.exceptions import CommodityMismatchError, IncomparableValueError


def _display_precision(scalar: Value) -> int:
    if isinstance(scalar, Amount):
        return scalar.display_precision
    return get_precision_settings().default_display_precision


def _quantity(scalar: Value) -> Fraction:
    if isinstance(scalar, Amount):
        return scalar.quantity
    return to_fraction(scalar)


def _measure(scalar: Value, exact: bool, places: int | None = None) -> Fraction:
    quantity = _quantity(scalar)
    if exact:
        return quantity
    if places is None:
        places = _display_precision(scalar)
    return Fraction(round_quantity(quantity, places))


def _measure_pair(left: Value, right: Value, exact: bool) -> tuple[Fraction, Fraction]:
    if exact:
        return _quantity(left), _quantity(right)
    places = min(_display_precision(left), _display_precision(right))
    return _measure(left, False, places), _measure(right, False, places)


def _conflicting(left: Value, right: Value) -> bool:
    return (
        isinstance(left, Amount)
        and isinstance(right, Amount)
        and left.commodity is not None
        and right.commodity is not None
        and left.commodity is not right.commodity
    )


# ---------------------------------------------------------------------------
# Sign tests
# ---------------------------------------------------------------------------


def _signs(value: Value, exact: bool) -> list[int]:
    kind_of(value)
    scalars = list(value) if isinstance(value, Balance) else [value]
    signs = []
    for scalar in scalars:
        measured = _measure(scalar, exact)
        signs.append((measured > 0) - (measured < 0))
    return signs


def is_zero(value: Value, *, exact: bool = False) -> bool:
    """Zero as displayed (or exactly, with ``exact=True``); every entry of a Balance."""
    return all(s == 0 for s in _signs(value, exact))


def is_realzero(value: Value) -> bool:
    return is_zero(value, exact=True)


def is_positive(value: Value, *, exact: bool = False) -> bool:
    """Every entry strictly positive."""
    return all(s > 0 for s in _signs(value, exact))


def is_negative(value: Value, *, exact: bool = False) -> bool:
    """Every entry strictly negative."""
    return all(s < 0 for s in _signs(value, exact))


def sign(value: Value, *, exact: bool = False) -> int:
    """
    1 if every entry is positive, -1 if every entry is negative, else 0.

    Agrees with ``is_positive`` and ``is_negative``; a Balance with entries
    of both signs has sign 0 although it is not zero.
    """
    signs = _signs(value, exact)
    if all(s > 0 for s in signs):
        return 1
    if all(s < 0 for s in signs):
        return -1
    return 0


# ---------------------------------------------------------------------------
# Equality
# ---------------------------------------------------------------------------


def _scalar_equal(left: Value, right: Value, exact: bool) -> bool:
    if _conflicting(left, right):
        return False
    left_measure, right_measure = _measure_pair(left, right, exact)
    return left_measure == right_measure


def _equal(left: Value, right: Value, exact: bool) -> bool:
    kind_of(left)
    kind_of(right)

    if isinstance(left, Balance) and isinstance(right, Balance):
        if left.commodities != right.commodities:
            return False
        return all(
            _scalar_equal(left.get(commodity), right.get(commodity), exact)
            for commodity in left.commodities
        )

    if isinstance(left, Balance) or isinstance(right, Balance):
        balance, other = (left, right) if isinstance(left, Balance) else (right, left)
        single = balance.single()
        return single is not None and _scalar_equal(single, other, exact)

    return _scalar_equal(left, right, exact)


def equals(left: Value, right: Value) -> bool:
    """Equal as displayed."""
    return _equal(left, right, exact=False)


def equals_exact(left: Value, right: Value) -> bool:
    """Equal as exact rationals."""
    return _equal(left, right, exact=True)


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------


def _resolve(value: Value) -> Value:
    kind_of(value)
    if isinstance(value, Balance):
        single = value.single()
        if single is None:
            raise IncomparableValueError(value.commodity_names)
        return single
    return value


def compare(left: Value, right: Value, *, exact: bool = False) -> int:
    """
    Three-way comparison: -1, 0 or 1.

    Raises:
        IncomparableValueError: if either side is a multi-entry Balance.
        CommodityMismatchError: if the sides carry different commodities.
    """
    left_scalar = _resolve(left)
    right_scalar = _resolve(right)
    if _conflicting(left_scalar, right_scalar):
        raise CommodityMismatchError(
            left_scalar.commodity.name, right_scalar.commodity.name
        )
    left_measure, right_measure = _measure_pair(left_scalar, right_scalar, exact)
    return (left_measure > right_measure) - (left_measure < right_measure)


def less_than(left: Value, right: Value, *, exact: bool = False) -> bool:
    return compare(left, right, exact=exact) < 0


def less_equal(left: Value, right: Value, *, exact: bool = False) -> bool:
    return compare(left, right, exact=exact) <= 0


def greater_than(left: Value, right: Value, *, exact: bool = False) -> bool:
    return compare(left, right, exact=exact) > 0


def greater_equal(left: Value, right: Value, *, exact: bool = False) -> bool:
    return compare(left, right, exact=exact) >= 0
