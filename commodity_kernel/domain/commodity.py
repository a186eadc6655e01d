"""
Commodity -- symbol descriptors and the shared display-precision registry.

Responsibility:
    Interns commodity symbols into Commodity records and tracks, per
    commodity, the largest internal precision ever observed on an Amount.
    That tracked value is the commodity's display precision.

Architecture position:
    Kernel > Domain -- the only shared mutable state in the kernel.
    Imported by amount, operations, predicates and the text collaborators.

Invariants enforced:
    - One Commodity per symbol name per registry; lookups never fail,
      unknown names are created on demand with display precision 0.
    - Display precision is monotonically non-decreasing. ``observe`` is an
      atomic compare-and-raise under a per-commodity lock, so concurrent
      observations never lose the maximum.
    - Symbol metadata (quoting, placement, spacing) is frozen at creation.
      Only ``thousand_marks`` changes afterwards, and only through
      ``CommodityRegistry.set_thousand_marks``.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Iterator

from commodity_kernel.config import get_precision_settings
from commodity_kernel.logging_config import get_logger

logger = get_logger("domain.commodity")

# Characters that force a symbol to be quoted when printed
_QUOTE_TRIGGERS = frozenset("0123456789-+*/^&|=<>{}[]()@;.,:!?\"' \t")


@dataclass(frozen=True, slots=True)
class CommoditySymbol:
    """
    Immutable printed form of a commodity.

    Guarantees:
        - name is non-empty text
        - needs_quoting is derived from name, never supplied
    """

    name: str
    prefixed: bool = False
    connected: bool = False
    needs_quoting: bool = field(init=False, default=False)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Commodity symbol name is required")
        object.__setattr__(
            self, "needs_quoting", any(ch in _QUOTE_TRIGGERS for ch in self.name)
        )

    @property
    def printed(self) -> str:
        """The name as it appears in output, quoted when required."""
        if self.needs_quoting:
            return f'"{self.name}"'
        return self.name


class Commodity:
    """
    A named unit with tracked display precision.

    Identity-keyed: two Commodity objects are equal only if they are the
    same record, which the registry guarantees for equal names.
    """

    __slots__ = ("symbol", "_display_precision", "_thousand_marks", "_lock")

    def __init__(self, symbol: CommoditySymbol):
        self.symbol = symbol
        self._display_precision = 0
        self._thousand_marks = False
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return self.symbol.name

    @property
    def display_precision(self) -> int:
        return self._display_precision

    @property
    def thousand_marks(self) -> bool:
        return self._thousand_marks

    def _raise_precision(self, precision: int) -> bool:
        with self._lock:
            if precision <= self._display_precision:
                return False
            self._display_precision = precision
            return True

    def _set_thousand_marks(self, enabled: bool) -> bool:
        with self._lock:
            if self._thousand_marks is enabled:
                return False
            self._thousand_marks = enabled
            return True

    def __str__(self) -> str:
        return self.symbol.printed

    def __repr__(self) -> str:
        return f"Commodity({self.name!r}, precision={self._display_precision})"


class CommodityRegistry:
    """
    Table of Commodity records keyed by symbol name.

    Contract:
        ``intern`` returns the record for a name, creating it on first use.
        ``observe`` is the sole precision mutator. No method raises for an
        unknown symbol.
    """

    def __init__(self) -> None:
        self._commodities: dict[str, Commodity] = {}
        self._lock = threading.Lock()

    def intern(
        self,
        symbol: str | CommoditySymbol,
        *,
        prefixed: bool = False,
        connected: bool = False,
    ) -> Commodity:
        """
        Return the Commodity for ``symbol``, creating it if unseen.

        When ``symbol`` is text, ``prefixed`` and ``connected`` describe the
        placement used if the commodity has to be created. An existing
        record keeps the metadata it was created with.
        """
        if isinstance(symbol, str):
            symbol = CommoditySymbol(symbol, prefixed=prefixed, connected=connected)

        existing = self._commodities.get(symbol.name)
        if existing is not None:
            return existing

        with self._lock:
            existing = self._commodities.get(symbol.name)
            if existing is not None:
                return existing
            commodity = Commodity(symbol)
            self._commodities[symbol.name] = commodity

        logger.debug(
            "commodity_created",
            extra={
                "commodity": symbol.name,
                "prefixed": symbol.prefixed,
                "connected": symbol.connected,
                "needs_quoting": symbol.needs_quoting,
            },
        )
        return commodity

    def lookup(self, name: str) -> Commodity | None:
        """Return the Commodity for ``name`` without creating it."""
        return self._commodities.get(name)

    def observe(self, commodity: Commodity, precision: int) -> None:
        """Raise ``commodity``'s display precision to ``precision`` if larger."""
        previous = commodity.display_precision
        if commodity._raise_precision(precision):
            logger.debug(
                "display_precision_raised",
                extra={
                    "commodity": commodity.name,
                    "previous": previous,
                    "precision": precision,
                },
            )

    def display_precision(self, commodity: Commodity | None) -> int:
        """Tracked precision of ``commodity``, or the default when absent."""
        if commodity is None:
            return get_precision_settings().default_display_precision
        return commodity.display_precision

    def set_thousand_marks(self, commodity: Commodity, enabled: bool) -> None:
        """Explicitly configure grouping separators for ``commodity``."""
        if commodity._set_thousand_marks(bool(enabled)):
            logger.debug(
                "thousand_marks_configured",
                extra={"commodity": commodity.name, "enabled": bool(enabled)},
            )

    def __contains__(self, name: object) -> bool:
        return name in self._commodities

    def __len__(self) -> int:
        return len(self._commodities)

    def __iter__(self) -> Iterator[Commodity]:
        return iter(sorted(self._commodities.values(), key=lambda c: c.name))


# ---------------------------------------------------------------------------
# Process-wide registry
# ---------------------------------------------------------------------------

_registry = CommodityRegistry()
_registry_lock = threading.Lock()


def get_registry() -> CommodityRegistry:
    """Return the process-wide registry."""
    return _registry


def reset_registry() -> CommodityRegistry:
    """Replace the process-wide registry with an empty one. FOR TESTING ONLY."""
    global _registry
    with _registry_lock:
        _registry = CommodityRegistry()
        return _registry
