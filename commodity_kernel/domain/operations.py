"""
Operations -- type promotion and precision propagation for arithmetic.

Responsibility:
    Implements add, subtract, multiply and divide over the Value variant
    (Integer | Amount | Balance), plus negation and absolute value.

Architecture position:
    Kernel > Domain -- pure functions. Results are new values; operands
    are never mutated. The only side effect is registry observation, which
    happens inside Amount construction.

Promotion:
    Integer  o Integer            -> Integer
    scalar   +/- scalar, same key -> Amount
    Amount   +/- Amount, diff key -> Balance (one entry per commodity)
    scalar   *// scalar           -> Amount carrying the left commodity
                                     (an Integer left adopts the right one)
    Balance  o anything           -> Balance (merged or scaled per entry)

    An Integer never opens a commodity slot of its own: it adopts the
    commodity of the Amount it meets, and joins the no-commodity slot when
    merged into a Balance.

Precision:
    add/subtract  max(L, R)
    multiply      L + R
    divide        max(L, R) + extra_precision; only max(L, R) is observed
    Integer operands contribute min(natural precision, extra_precision).
    exact = L.exact or R.exact.

Failure modes:
    - DivisionByZeroError when the divisor's quantity is exactly zero.
    - BalanceOperandError when a multi-entry Balance is used as a divisor,
      or as a multiplier of a non-Integer scalar.
    - TypeError for operands outside the Value variant.
"""

from __future__ import annotations

from enum import Enum
from fractions import Fraction
from typing import Iterable

from commodity_kernel.config import get_precision_settings
from commodity_kernel.domain.amount import Amount
from commodity_kernel.domain.balance import Balance
from commodity_kernel.domain.commodity import Commodity
from commodity_kernel.domain.value import (
    Value,
    ValueKind,
    integer_precision,
    kind_of,
    normalize_integer,
    to_fraction,
)
from commodity_kernel.exceptions import BalanceOperandError, DivisionByZeroError
from commodity_kernel.logging_config import get_logger

logger = get_logger("domain.operations")


class Operation(str, Enum):
    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DIVIDE = "divide"


# ---------------------------------------------------------------------------
# Public operations
# ---------------------------------------------------------------------------


def add(left: Value, right: Value) -> Value:
    """Sum of two values; incompatible commodities promote to a Balance."""
    return _additive(Operation.ADD, left, right)


def subtract(left: Value, right: Value) -> Value:
    """Difference of two values; incompatible commodities promote to a Balance."""
    return _additive(Operation.SUBTRACT, left, right)


def multiply(left: Value, right: Value) -> Value:
    """Product. The right operand's commodity is ignored."""
    return _scaling(Operation.MULTIPLY, left, right)


def divide(left: Value, right: Value) -> Value:
    """
    Quotient. The right operand's commodity is ignored.

    Raises:
        DivisionByZeroError: if the divisor's quantity is exactly zero.
    """
    return _scaling(Operation.DIVIDE, left, right)


def negate(value: Value) -> Value:
    """Additive inverse, keeping precision and exactness."""
    kind_of(value)
    return -value


def absolute(value: Value) -> Value:
    """Absolute value per entry, keeping precision and exactness."""
    kind_of(value)
    return abs(value)


def apply(operation: Operation | str, left: Value, right: Value) -> Value:
    """Dispatch by operation name."""
    operation = Operation(operation)
    return _DISPATCH[operation](left, right)


def sum_values(values: Iterable[Value]) -> Value:
    """Left fold of ``add`` starting from the Integer 0."""
    total: Value = 0
    for value in values:
        total = add(total, value)
    return total


# ---------------------------------------------------------------------------
# Add / subtract
# ---------------------------------------------------------------------------


def _additive(operation: Operation, left: Value, right: Value) -> Value:
    left_kind = kind_of(left)
    right_kind = kind_of(right)

    if left_kind is ValueKind.INTEGER and right_kind is ValueKind.INTEGER:
        return normalize_integer(
            _combine(operation, to_fraction(left), to_fraction(right))
        )

    if left_kind is ValueKind.BALANCE or right_kind is ValueKind.BALANCE:
        return _merge(operation, _entries_of(left), _entries_of(right))

    left_amount, right_amount = _align(left, right)
    if left_amount.commodity is not right_amount.commodity:
        logger.debug(
            "balance_promoted",
            extra={
                "operation": operation.value,
                "commodities": [
                    _name(left_amount.commodity),
                    _name(right_amount.commodity),
                ],
            },
        )
        return _merge(operation, [left_amount], [right_amount])

    return _combine_amounts(operation, left_amount, right_amount)


def _align(left: Value, right: Value) -> tuple[Amount, Amount]:
    """Lift Integer operands to Amounts of the other side's commodity."""
    if isinstance(left, Amount) and isinstance(right, Amount):
        return left, right
    if isinstance(left, Amount):
        return left, _lift(right, left.commodity)
    return _lift(left, right.commodity), right


def _lift(value: Value, commodity: Commodity | None) -> Amount:
    """An Integer as an Amount of ``commodity`` with its capped precision."""
    return Amount(
        quantity=to_fraction(value),
        commodity=commodity,
        precision=integer_precision(value),
    )


def _combine(operation: Operation, left: Fraction, right: Fraction) -> Fraction:
    if operation is Operation.ADD:
        return left + right
    return left - right


def _combine_amounts(operation: Operation, left: Amount, right: Amount) -> Amount:
    return Amount._derived(
        _combine(operation, left.quantity, right.quantity),
        left.commodity,
        precision=max(left.precision, right.precision),
        significant=max(left.significant, right.significant),
        exact=left.exact or right.exact,
    )


def _entries_of(value: Value) -> list[Amount]:
    if isinstance(value, Balance):
        return list(value)
    if isinstance(value, Amount):
        return [value]
    return [_lift(value, None)]


def _merge(operation: Operation, left: list[Amount], right: list[Amount]) -> Value:
    entries: dict[Commodity | None, Amount] = {a.commodity: a for a in left}
    for amount in right:
        current = entries.get(amount.commodity)
        if current is None:
            merged = amount if operation is Operation.ADD else -amount
        else:
            merged = _combine_amounts(operation, current, amount)
        if merged.quantity == 0:
            entries.pop(amount.commodity, None)
        else:
            entries[amount.commodity] = merged
    return _balance_or_zero(operation, entries.values())


def _balance_or_zero(operation: Operation, amounts: Iterable[Amount]) -> Value:
    amounts = [a for a in amounts if a.quantity != 0]
    if not amounts:
        logger.debug("balance_collapsed", extra={"operation": operation.value})
        return 0
    return Balance(amounts)


# ---------------------------------------------------------------------------
# Multiply / divide
# ---------------------------------------------------------------------------


def _scaling(operation: Operation, left: Value, right: Value) -> Value:
    left_kind = kind_of(left)
    right_kind = kind_of(right)

    if operation is Operation.DIVIDE:
        _check_divisor(left, right)

    if left_kind is ValueKind.INTEGER and right_kind is ValueKind.INTEGER:
        return normalize_integer(
            _scale(operation, to_fraction(left), to_fraction(right))
        )

    if left_kind is ValueKind.BALANCE:
        factor = _scalar_operand(operation, right)
        return _balance_or_zero(
            operation, (_scale_amount(operation, entry, factor) for entry in left)
        )

    if right_kind is ValueKind.BALANCE:
        single = right.single()
        if single is not None:
            right = single
        elif operation is Operation.MULTIPLY and left_kind is ValueKind.INTEGER:
            return _balance_or_zero(
                operation, (_scale_amount(operation, entry, left) for entry in right)
            )
        else:
            raise BalanceOperandError(operation.value, right.commodity_names)

    if isinstance(left, Amount):
        return _scale_amount(operation, left, right)
    # Integer left adopts the right Amount's commodity
    return _scale_amount(operation, _lift(left, right.commodity), right)


def _scalar_operand(operation: Operation, value: Value) -> Value:
    if isinstance(value, Balance):
        single = value.single()
        if single is None:
            raise BalanceOperandError(operation.value, value.commodity_names)
        return single
    return value


def _scale(operation: Operation, left: Fraction, right: Fraction) -> Fraction:
    if operation is Operation.MULTIPLY:
        return left * right
    return left / right


def _scale_amount(operation: Operation, amount: Amount, factor: Value) -> Amount:
    """Scale ``amount`` by ``factor``; ``amount`` supplies the commodity."""
    if isinstance(factor, Amount):
        factor_quantity = factor.quantity
        factor_precision = factor.precision
        factor_significant = factor.significant
        factor_exact = factor.exact
    else:
        factor_quantity = to_fraction(factor)
        factor_precision = factor_significant = integer_precision(factor)
        factor_exact = False

    if operation is Operation.MULTIPLY:
        precision = amount.precision + factor_precision
        significant = amount.significant + factor_significant
    else:
        # the extra digits are internal only and never widen the display
        precision = (
            max(amount.precision, factor_precision)
            + get_precision_settings().extra_precision
        )
        significant = max(amount.significant, factor_significant)

    return Amount._derived(
        _scale(operation, amount.quantity, factor_quantity),
        amount.commodity,
        precision=precision,
        significant=significant,
        exact=amount.exact or factor_exact,
    )


def _check_divisor(left: Value, right: Value) -> None:
    if isinstance(right, Balance):
        # A Balance never holds a zero entry; only multi-entry shape can fail
        return
    quantity = right.quantity if isinstance(right, Amount) else to_fraction(right)
    if quantity == 0:
        logger.warning(
            "division_by_zero",
            extra={"dividend": repr(left), "divisor": repr(right)},
        )
        raise DivisionByZeroError(repr(left), repr(right))


def _name(commodity: Commodity | None) -> str:
    return commodity.name if commodity is not None else "<none>"


_DISPATCH = {
    Operation.ADD: add,
    Operation.SUBTRACT: subtract,
    Operation.MULTIPLY: multiply,
    Operation.DIVIDE: divide,
}
