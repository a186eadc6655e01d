"""
Balance -- a sum of Amounts in mutually incompatible commodities.

Holds at most one Amount per commodity, with ``None`` as the
"no commodity" key. Never holds an exactly-zero entry and is never empty:
the dispatcher collapses a fully cancelled Balance to the Integer 0.

Balances are immutable. Arithmetic that changes a Balance returns a new one
(see ``operations``).
"""

from __future__ import annotations

from typing import Iterable, Iterator

from commodity_kernel.domain.amount import Amount
from commodity_kernel.domain.commodity import Commodity


def commodity_sort_key(commodity: Commodity | None) -> tuple[int, str]:
    """Order with the no-commodity slot first, then by symbol name."""
    if commodity is None:
        return (0, "")
    return (1, commodity.name)


class Balance:
    """
    Immutable mapping of commodity -> Amount.

    Raises:
        ValueError: on construction with two amounts of the same commodity,
            or with no nonzero amounts at all.
    """

    __slots__ = ("_entries",)

    def __init__(self, amounts: Iterable[Amount]):
        entries: dict[Commodity | None, Amount] = {}
        for amount in amounts:
            if not isinstance(amount, Amount):
                raise TypeError(f"Balance entries must be Amount, got {type(amount)}")
            if amount.commodity in entries:
                raise ValueError(
                    f"Duplicate balance entry for commodity {amount.commodity!r}"
                )
            if amount.quantity != 0:
                entries[amount.commodity] = amount
        if not entries:
            raise ValueError("A balance needs at least one nonzero amount")
        self._entries = dict(
            sorted(entries.items(), key=lambda item: commodity_sort_key(item[0]))
        )

    @property
    def amounts(self) -> tuple[Amount, ...]:
        """Entries in display order."""
        return tuple(self._entries.values())

    @property
    def commodities(self) -> tuple[Commodity | None, ...]:
        return tuple(self._entries)

    @property
    def commodity_names(self) -> list[str]:
        return [c.name if c is not None else "<none>" for c in self._entries]

    def get(self, commodity: Commodity | None) -> Amount | None:
        return self._entries.get(commodity)

    def single(self) -> Amount | None:
        """The sole entry if there is exactly one."""
        if len(self._entries) == 1:
            return next(iter(self._entries.values()))
        return None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Amount]:
        return iter(self._entries.values())

    def __contains__(self, commodity: object) -> bool:
        return commodity in self._entries

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Balance):
            return NotImplemented
        return self._entries == other._entries

    def __hash__(self) -> int:
        return hash(frozenset(self._entries.items()))

    def __neg__(self) -> Balance:
        return Balance(-amount for amount in self)

    def __abs__(self) -> Balance:
        return Balance(abs(amount) for amount in self)

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

    def __str__(self) -> str:
        from commodity_kernel.formatting import format_balance

        return format_balance(self)

    def __repr__(self) -> str:
        return f"Balance({list(self._entries.values())!r})"
