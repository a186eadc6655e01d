"""
Amount -- a rational quantity bound to an optional commodity.

Responsibility:
    The single-commodity value object. Pairs an exact ``Fraction`` with an
    optional Commodity, its own internal precision, and the exact
    (keep-precision) flag.

Architecture position:
    Kernel > Domain -- pure value object. Depends on commodity (registry
    observation) and value (numeric primitives).

Invariants enforced:
    - quantity is always a ``Fraction``; floats are rejected.
    - precision is a non-negative integer and at least the number of
      fractional digits of the literal the Amount was built from.
    - Every construction with a commodity informs the registry through
      ``observe``. There is no construction path that skips it. Only
      arithmetic results, through a private factory, report fewer
      significant digits than their internal precision.
    - Immutable and hashable (frozen dataclass with slots).

Failure modes:
    - TypeError for float quantities or non-Commodity commodities.
    - ValueError for non-finite or malformed literals and negative precision.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from fractions import Fraction

from commodity_kernel.domain.commodity import (
    Commodity,
    CommodityRegistry,
    CommoditySymbol,
    get_registry,
)
from commodity_kernel.domain.value import natural_precision, round_quantity


@dataclass(frozen=True, slots=True)
class Amount:
    """
    Quantity of one commodity, or a bare number when commodity is None.

    ``==`` on Amount is structural (quantity, commodity, precision, exact).
    Value semantics live in ``predicates.equals`` / ``equals_exact``.

    ``significant`` is the part of ``precision`` reported to the registry.
    It equals ``precision`` for every constructed Amount; only quotients
    and values derived from them carry fewer significant digits than
    internal ones.
    """

    quantity: Fraction
    commodity: Commodity | None = None
    precision: int = 0
    exact: bool = False
    significant: int = field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        self._validate()
        object.__setattr__(self, "significant", self.precision)
        self._observe()

    @classmethod
    def _derived(
        cls,
        quantity: Fraction,
        commodity: Commodity | None,
        precision: int,
        significant: int,
        exact: bool,
    ) -> Amount:
        """Arithmetic result reporting ``significant`` digits to the registry."""
        amount = object.__new__(cls)
        object.__setattr__(amount, "quantity", quantity)
        object.__setattr__(amount, "commodity", commodity)
        object.__setattr__(amount, "precision", precision)
        object.__setattr__(amount, "exact", exact)
        amount._validate()
        object.__setattr__(amount, "significant", min(significant, precision))
        amount._observe()
        return amount

    def _validate(self) -> None:
        if isinstance(self.quantity, float):
            raise TypeError("Amount quantity must not be a float")
        if not isinstance(self.quantity, Fraction):
            object.__setattr__(self, "quantity", Fraction(self.quantity))
        if self.commodity is not None and not isinstance(self.commodity, Commodity):
            raise TypeError(
                f"commodity must be Commodity or None, got {type(self.commodity)}"
            )
        if isinstance(self.precision, bool) or not isinstance(self.precision, int):
            raise TypeError(f"precision must be int, got {type(self.precision)}")
        if self.precision < 0:
            raise ValueError(f"precision must be non-negative: {self.precision}")

    def _observe(self) -> None:
        if self.commodity is not None:
            get_registry().observe(self.commodity, self.significant)

    @classmethod
    def of(
        cls,
        quantity: Decimal | str | int,
        symbol: str | CommoditySymbol | Commodity | None = None,
        *,
        exact: bool = False,
        registry: CommodityRegistry | None = None,
    ) -> Amount:
        """
        Standard construction from an exact decimal literal.

        Precision is the literal's number of fractional digits. The
        commodity is interned in ``registry`` (process-wide by default)
        and observes that precision.

        Raises:
            TypeError: if ``quantity`` is a float.
            ValueError: if ``quantity`` is not a finite decimal literal.
        """
        literal = _to_decimal(quantity)
        commodity: Commodity | None
        if symbol is None or isinstance(symbol, Commodity):
            commodity = symbol
        else:
            if registry is None:
                registry = get_registry()
            commodity = registry.intern(symbol)
        return cls(
            quantity=Fraction(literal),
            commodity=commodity,
            precision=natural_precision(literal),
            exact=exact,
        )

    @classmethod
    def exact_of(
        cls,
        quantity: Decimal | str | int,
        symbol: str | CommoditySymbol | Commodity | None = None,
        *,
        registry: CommodityRegistry | None = None,
    ) -> Amount:
        """Exact (keep-precision) construction. Still observed by the registry."""
        return cls.of(quantity, symbol, exact=True, registry=registry)

    @property
    def display_precision(self) -> int:
        """Digits shown by default: own precision if exact, else the commodity's."""
        if self.exact:
            return self.precision
        return get_registry().display_precision(self.commodity)

    @property
    def full_precision(self) -> int:
        return self.precision

    @property
    def has_commodity(self) -> bool:
        return self.commodity is not None

    def rounded(self, places: int | None = None) -> Decimal:
        """Quantity rounded half away from zero (display precision by default)."""
        return round_quantity(
            self.quantity, self.display_precision if places is None else places
        )

    def with_quantity(self, quantity: Fraction) -> Amount:
        """Same commodity, precisions and exactness; observes nothing new."""
        return Amount._derived(
            Fraction(quantity),
            self.commodity,
            self.precision,
            self.significant,
            self.exact,
        )

    def __neg__(self) -> Amount:
        return self.with_quantity(-self.quantity)

    def __abs__(self) -> Amount:
        return self.with_quantity(abs(self.quantity))

    def __add__(self, other):
        from commodity_kernel.domain import operations

        return operations.add(self, other)

    def __radd__(self, other):
        from commodity_kernel.domain import operations

        return operations.add(other, self)

    def __sub__(self, other):
        from commodity_kernel.domain import operations

        return operations.subtract(self, other)

    def __rsub__(self, other):
        from commodity_kernel.domain import operations

        return operations.subtract(other, self)

    def __mul__(self, other):
        from commodity_kernel.domain import operations

        return operations.multiply(self, other)

    def __rmul__(self, other):
        from commodity_kernel.domain import operations

        return operations.multiply(other, self)

    def __truediv__(self, other):
        from commodity_kernel.domain import operations

        return operations.divide(self, other)

    def __rtruediv__(self, other):
        from commodity_kernel.domain import operations

        return operations.divide(other, self)

    def __lt__(self, other) -> bool:
        from commodity_kernel.domain import predicates

        return predicates.less_than(self, other)

    def __le__(self, other) -> bool:
        from commodity_kernel.domain import predicates

        return predicates.less_equal(self, other)

    def __gt__(self, other) -> bool:
        from commodity_kernel.domain import predicates

        return predicates.greater_than(self, other)

    def __ge__(self, other) -> bool:
        from commodity_kernel.domain import predicates

        return predicates.greater_equal(self, other)

    def __str__(self) -> str:
        from commodity_kernel.formatting import format_amount

        return format_amount(self)

    def __repr__(self) -> str:
        name = self.commodity.name if self.commodity is not None else None
        return (
            f"Amount({str(self.quantity)!r}, {name!r}, "
            f"precision={self.precision}, exact={self.exact})"
        )


def _to_decimal(quantity: Decimal | str | int) -> Decimal:
    if isinstance(quantity, (float, bool)):
        raise TypeError(f"Amount literal must be Decimal, str or int, got {type(quantity)}")
    if isinstance(quantity, Decimal):
        literal = quantity
    else:
        try:
            literal = Decimal(str(quantity).strip())
        except InvalidOperation as e:
            raise ValueError(f"Invalid amount literal: {quantity!r}") from e
    if not literal.is_finite():
        raise ValueError(f"Amount literal must be finite: {quantity!r}")
    return literal
