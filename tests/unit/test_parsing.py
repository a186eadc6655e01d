"""
Tests for reading amount literals from text.

Verifies:
- Prefixed / suffixed / connected symbol detection
- Quoted symbols and grouping commas
- Precision from digits after the decimal point
- Rejection of malformed literals
"""

from decimal import Decimal
from fractions import Fraction

import pytest

from commodity_kernel.domain.amount import Amount
from commodity_kernel.exceptions import AmountParseError
from commodity_kernel.parsing import parse_amount, parse_value


class TestParseAmount:
    """Tests for parse_amount."""

    def test_prefixed_connected(self):
        a = parse_amount("$100.00")
        assert a.commodity.name == "$"
        assert a.commodity.symbol.prefixed
        assert a.commodity.symbol.connected
        assert a.quantity == 100
        assert a.precision == 2

    def test_suffixed_with_space(self):
        a = parse_amount("100.5 EUR")
        symbol = a.commodity.symbol
        assert not symbol.prefixed
        assert not symbol.connected
        assert a.quantity == Fraction(201, 2)
        assert a.precision == 1

    def test_prefixed_with_space(self):
        assert not parse_amount("EUR 5").commodity.symbol.connected

    def test_suffixed_connected(self):
        a = parse_amount("10AAPL")
        assert a.commodity.name == "AAPL"
        assert a.commodity.symbol.connected

    def test_quoted_symbol(self):
        a = parse_amount('"M&M" 3')
        assert a.commodity.name == "M&M"
        assert a.commodity.symbol.needs_quoting

    @pytest.mark.parametrize("text", ["-$1.50", "$-1.50", "-1.50 $"])
    def test_negative_forms(self, text):
        assert parse_amount(text).quantity == Fraction(-3, 2)

    def test_grouping_commas(self):
        a = parse_amount("$1,234,567.89")
        assert a.quantity == Fraction(123456789, 100)
        assert a.precision == 2

    def test_bare_number_has_no_commodity(self):
        a = parse_amount("200")
        assert a.commodity is None
        assert a.precision == 0

    def test_leading_decimal_point(self):
        assert parse_amount(".25").precision == 2

    def test_trailing_decimal_point(self):
        assert parse_amount("$5.").precision == 0

    def test_exact_flag(self):
        assert parse_amount("$1.00", exact=True).exact

    def test_observes_precision(self, registry):
        parse_amount("$1.000")
        assert registry.intern("$").display_precision == 3

    def test_existing_metadata_kept(self, registry):
        parse_amount("$1.00")
        later = parse_amount("2 $")
        assert later.commodity.symbol.prefixed

    def test_does_not_set_thousand_marks(self, registry):
        parse_amount("$1,000.00")
        assert registry.intern("$").thousand_marks is False

    def test_custom_registry(self):
        from commodity_kernel.domain.commodity import CommodityRegistry, get_registry

        private = CommodityRegistry()
        a = parse_amount("7 XAU", registry=private)
        assert a.commodity is private.lookup("XAU")
        assert "XAU" not in get_registry()

    @pytest.mark.parametrize(
        "text",
        ["", "abc", "$", "1,2", "$1 EUR", "--1", "1 - 2", "$1.0.0", "1-"],
    )
    def test_malformed_rejected(self, text):
        with pytest.raises(AmountParseError) as exc_info:
            parse_amount(text)
        assert exc_info.value.code == "AMOUNT_PARSE_ERROR"
        assert exc_info.value.text == text

    def test_non_string_rejected(self):
        with pytest.raises(TypeError):
            parse_amount(5)


class TestParseValue:
    """Tests for parse_value."""

    def test_whole_number_is_int(self):
        assert parse_value("42") == 42
        assert isinstance(parse_value("42"), int)

    def test_decimal_number_keeps_precision(self):
        value = parse_value("1.50")
        assert value == Decimal("1.50")
        assert isinstance(value, Decimal)

    def test_commodity_gives_amount(self):
        assert isinstance(parse_value("$1"), Amount)

    def test_empty_private_registry_is_used(self, registry):
        from commodity_kernel.domain.commodity import CommodityRegistry

        private = CommodityRegistry()
        value = parse_value("3 XAG", registry=private)
        assert value.commodity is private.lookup("XAG")
        assert "XAG" not in registry
