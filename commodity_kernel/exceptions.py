"""
Typed Exception Hierarchy for the Commodity Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers of the arithmetic core must be able to tell a division by zero from a
commodity mismatch without parsing message strings. Every error therefore:
  1. Has its own exception class (catch by type, not message)
  2. Carries a CODE class attribute (machine-readable, API-safe)
  3. Stores the values involved as attributes (not just a message string)

Example:
    try:
        less_than(left, right)
    except CommodityMismatchError as e:
        report(e.code, e.left_commodity, e.right_commodity)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    CommodityKernelError (base)
    |
    +-- ArithmeticValueError
    |   +-- DivisionByZeroError
    |   +-- BalanceOperandError
    |
    +-- ComparisonError
    |   +-- CommodityMismatchError
    |   +-- IncomparableValueError
    |
    +-- AmountParseError
    |
    +-- ConfigurationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                 | When Raised
----------------|----------------------|-----------------------------------------
Arithmetic      | DIVISION_BY_ZERO     | Divisor quantity is exactly zero
                | BALANCE_OPERAND      | Multiply/divide by a multi-entry Balance
----------------|----------------------|-----------------------------------------
Comparison      | COMMODITY_MISMATCH   | Ordering two different commodities
                | INCOMPARABLE_VALUE   | Ordering a multi-entry Balance
----------------|----------------------|-----------------------------------------
Parsing         | AMOUNT_PARSE_ERROR   | Text is not a valid amount literal
----------------|----------------------|-----------------------------------------
Configuration   | CONFIGURATION_ERROR  | Invalid precision settings

None of these conditions is transient. Nothing in the kernel retries.
Construction, equality, zero and sign tests never raise.
"""


class CommodityKernelError(Exception):
    """
    Base exception for all commodity kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "COMMODITY_KERNEL_ERROR"


# Arithmetic exceptions


class ArithmeticValueError(CommodityKernelError):
    """Base exception for failed arithmetic on values."""

    code: str = "ARITHMETIC_ERROR"


class DivisionByZeroError(ArithmeticValueError):
    """The divisor's quantity is exactly zero."""

    code: str = "DIVISION_BY_ZERO"

    def __init__(self, dividend: str, divisor: str):
        self.dividend = dividend
        self.divisor = divisor
        super().__init__(f"Cannot divide {dividend} by zero ({divisor})")


class BalanceOperandError(ArithmeticValueError):
    """
    A multi-entry Balance was used as the scalar operand of multiply/divide.

    Scaling is defined per entry; there is no single quantity to scale by.
    """

    code: str = "BALANCE_OPERAND"

    def __init__(self, operation: str, commodities: list[str]):
        self.operation = operation
        self.commodities = commodities
        super().__init__(
            f"Cannot {operation} by a balance of {len(commodities)} commodities: "
            f"{', '.join(commodities)}"
        )


# Comparison exceptions


class ComparisonError(CommodityKernelError):
    """Base exception for ordering comparisons that are not defined."""

    code: str = "COMPARISON_ERROR"


class CommodityMismatchError(ComparisonError):
    """Ordering requested between two different, non-absent commodities."""

    code: str = "COMMODITY_MISMATCH"

    def __init__(self, left_commodity: str, right_commodity: str):
        self.left_commodity = left_commodity
        self.right_commodity = right_commodity
        super().__init__(
            f"Cannot order amounts with different commodities: "
            f"{left_commodity} and {right_commodity}"
        )


class IncomparableValueError(ComparisonError):
    """Ordering requested on a Balance holding more than one commodity."""

    code: str = "INCOMPARABLE_VALUE"

    def __init__(self, commodities: list[str]):
        self.commodities = commodities
        super().__init__(
            f"Cannot order a balance of {len(commodities)} commodities: "
            f"{', '.join(commodities)}"
        )


# Collaborator exceptions


class AmountParseError(CommodityKernelError):
    """Text could not be parsed as an amount literal."""

    code: str = "AMOUNT_PARSE_ERROR"

    def __init__(self, text: str, reason: str):
        self.text = text
        self.reason = reason
        super().__init__(f"Cannot parse amount {text!r}: {reason}")


class ConfigurationError(CommodityKernelError):
    """Precision settings or a settings document are invalid."""

    code: str = "CONFIGURATION_ERROR"

    def __init__(self, setting: str, value: object, reason: str):
        self.setting = setting
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid setting {setting}={value!r}: {reason}")
