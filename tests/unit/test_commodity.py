"""
Tests for commodity symbols and the display-precision registry.

Verifies:
- Lazy interning with a single record per symbol name
- Monotonic, order-independent display precision
- Default precision for the no-commodity slot
- Symbol metadata frozen at creation; thousand marks set explicitly
"""

import pytest

from commodity_kernel.config import configure_precision
from commodity_kernel.domain.amount import Amount
from commodity_kernel.domain.commodity import (
    Commodity,
    CommodityRegistry,
    CommoditySymbol,
    get_registry,
    reset_registry,
)


class TestCommoditySymbol:
    """Tests for the immutable symbol descriptor."""

    def test_plain_symbol_needs_no_quoting(self):
        assert not CommoditySymbol("$").needs_quoting
        assert not CommoditySymbol("EUR").needs_quoting

    def test_symbols_with_digits_or_operators_need_quoting(self):
        assert CommoditySymbol("M&M").needs_quoting
        assert CommoditySymbol("VANGUARD 500").needs_quoting
        assert CommoditySymbol("X1").needs_quoting

    def test_printed_form_quotes_when_needed(self):
        assert CommoditySymbol("M&M").printed == '"M&M"'
        assert CommoditySymbol("AAPL").printed == "AAPL"

    def test_symbol_is_immutable(self):
        symbol = CommoditySymbol("$", prefixed=True)
        with pytest.raises(AttributeError):
            symbol.prefixed = False

    def test_empty_name_rejected(self):
        with pytest.raises(ValueError, match="name is required"):
            CommoditySymbol("")


class TestInterning:
    """Tests for CommodityRegistry.intern."""

    def test_unknown_symbol_created_with_zero_precision(self, registry):
        commodity = registry.intern("$")
        assert isinstance(commodity, Commodity)
        assert commodity.display_precision == 0
        assert commodity.thousand_marks is False

    def test_same_name_returns_same_record(self, registry):
        assert registry.intern("$") is registry.intern("$")

    def test_first_creation_fixes_metadata(self, registry):
        first = registry.intern("$", prefixed=True, connected=True)
        again = registry.intern(CommoditySymbol("$", prefixed=False))
        assert again is first
        assert again.symbol.prefixed is True
        assert again.symbol.connected is True

    def test_lookup_does_not_create(self, registry):
        assert registry.lookup("EUR") is None
        assert "EUR" not in registry
        registry.intern("EUR")
        assert registry.lookup("EUR") is not None
        assert len(registry) == 1

    def test_iteration_is_sorted_by_name(self, registry):
        for name in ("EUR", "$", "AAPL"):
            registry.intern(name)
        assert [c.name for c in registry] == ["$", "AAPL", "EUR"]

    def test_reset_registry_discards_commodities(self):
        get_registry().intern("$")
        fresh = reset_registry()
        assert fresh is get_registry()
        assert "$" not in fresh


class TestObserve:
    """Tests for the monotonic precision update."""

    def test_observe_raises_precision(self, registry):
        commodity = registry.intern("$")
        registry.observe(commodity, 2)
        assert registry.display_precision(commodity) == 2

    def test_observe_never_lowers_precision(self, registry):
        commodity = registry.intern("$")
        registry.observe(commodity, 4)
        registry.observe(commodity, 1)
        assert registry.display_precision(commodity) == 4

    @pytest.mark.parametrize("order", [(2, 5), (5, 2)])
    def test_order_independent(self, registry, order):
        commodity = registry.intern("$")
        for precision in order:
            registry.observe(commodity, precision)
        assert registry.display_precision(commodity) == 5

    def test_construction_observes_literal_precision(self, registry):
        Amount.of("1.5", "EUR")
        Amount.of("2.125", "EUR")
        Amount.of("3", "EUR")
        assert registry.display_precision(registry.intern("EUR")) == 3

    def test_exact_construction_still_observes(self, registry):
        Amount.exact_of("1.2345", "BTC")
        assert registry.intern("BTC").display_precision == 4

    def test_raise_is_logged(self, registry, captured_logs):
        registry.observe(registry.intern("$"), 2)
        registry.observe(registry.intern("$"), 1)
        raised = [r for r in captured_logs() if r["message"] == "display_precision_raised"]
        assert len(raised) == 1
        assert raised[0]["commodity"] == "$"
        assert raised[0]["precision"] == 2


class TestDisplayPrecisionQuery:
    """Tests for display_precision with and without a commodity."""

    def test_no_commodity_uses_default(self, registry):
        assert registry.display_precision(None) == 3

    def test_no_commodity_follows_configuration(self, registry):
        configure_precision(default_display_precision=5)
        assert registry.display_precision(None) == 5


class TestThousandMarks:
    """Tests for the explicitly configured grouping flag."""

    def test_set_thousand_marks(self, registry):
        commodity = registry.intern("$")
        registry.set_thousand_marks(commodity, True)
        assert commodity.thousand_marks is True

    def test_thousand_marks_can_be_switched_off(self, registry):
        commodity = registry.intern("$")
        registry.set_thousand_marks(commodity, True)
        registry.set_thousand_marks(commodity, False)
        assert commodity.thousand_marks is False

    def test_only_changes_are_logged(self, registry, captured_logs):
        commodity = registry.intern("EUR")
        registry.set_thousand_marks(commodity, True)
        registry.set_thousand_marks(commodity, True)
        events = [
            r for r in captured_logs() if r["message"] == "thousand_marks_configured"
        ]
        assert len(events) == 1
        assert events[0]["commodity"] == "EUR"
        assert events[0]["enabled"] is True

    def test_arithmetic_does_not_touch_thousand_marks(self, registry):
        a = Amount.of("1000.00", "$")
        _ = a + a
        assert registry.intern("$").thousand_marks is False

    def test_separate_registries_are_independent(self):
        one, two = CommodityRegistry(), CommodityRegistry()
        assert one.intern("$") is not two.intern("$")
