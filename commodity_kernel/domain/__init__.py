"""
Pure domain layer.

Value objects and the functions over them, with NO dependencies on:
- I/O
- Text parsing or formatting
- Time/clock

Amounts and Balances are immutable. The commodity registry is the only
shared mutable state and changes monotonically.
"""

from commodity_kernel.domain.amount import Amount
from commodity_kernel.domain.balance import Balance
from commodity_kernel.domain.commodity import (
    Commodity,
    CommodityRegistry,
    CommoditySymbol,
    get_registry,
    reset_registry,
)
from commodity_kernel.domain.operations import (
    Operation,
    absolute,
    add,
    apply,
    divide,
    multiply,
    negate,
    subtract,
    sum_values,
)
from commodity_kernel.domain.predicates import (
    compare,
    equals,
    equals_exact,
    greater_equal,
    greater_than,
    is_negative,
    is_positive,
    is_realzero,
    is_zero,
    less_equal,
    less_than,
    sign,
)
from commodity_kernel.domain.value import Integer, Value, ValueKind, kind_of

__all__ = [
    # Value objects
    "Amount",
    "Balance",
    "Integer",
    "Value",
    "ValueKind",
    "kind_of",
    # Commodities
    "Commodity",
    "CommodityRegistry",
    "CommoditySymbol",
    "get_registry",
    "reset_registry",
    # Arithmetic
    "Operation",
    "add",
    "subtract",
    "multiply",
    "divide",
    "negate",
    "absolute",
    "apply",
    "sum_values",
    # Predicates
    "equals",
    "equals_exact",
    "compare",
    "less_than",
    "less_equal",
    "greater_than",
    "greater_equal",
    "is_zero",
    "is_realzero",
    "is_positive",
    "is_negative",
    "sign",
]
