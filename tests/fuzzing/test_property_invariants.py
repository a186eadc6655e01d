"""
Hypothesis-based property tests for the value algebra.

Properties checked:
- Display precision only ever grows, to the largest precision observed
- Exact equality implies display equality
- Add/subtract identities and commutativity
- Fully cancelled balances collapse to the integer zero
- Result precision rules for add and multiply
- Quotients reused in later arithmetic never widen the display
"""

from decimal import Decimal

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from commodity_kernel.domain.amount import Amount
from commodity_kernel.domain.balance import Balance
from commodity_kernel.domain.commodity import CommodityRegistry, get_registry
from commodity_kernel.domain.operations import add, divide, multiply, subtract
from commodity_kernel.domain.predicates import equals, equals_exact, is_zero

# The autouse registry fixture is reset once per test, not per example; every
# property below holds whatever precision the shared registry has reached.
FUZZ_SETTINGS = settings(
    max_examples=150,
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)

SYMBOLS = st.sampled_from(["$", "EUR", "AAPL", "XAU"])


@st.composite
def literals(draw, max_places: int = 6) -> Decimal:
    """A decimal literal with an explicit number of fractional digits."""
    digits = draw(st.integers(min_value=-(10**12), max_value=10**12))
    places = draw(st.integers(min_value=0, max_value=max_places))
    return Decimal(digits).scaleb(-places)


@st.composite
def amounts(draw, symbol=SYMBOLS) -> Amount:
    return Amount.of(draw(literals()), draw(symbol))


class TestRegistryProperties:
    @FUZZ_SETTINGS
    @given(st.lists(st.integers(min_value=0, max_value=30), min_size=1, max_size=40))
    def test_observe_keeps_maximum(self, precisions):
        registry = CommodityRegistry()
        commodity = registry.intern("$")
        seen = 0
        for precision in precisions:
            registry.observe(commodity, precision)
            assert commodity.display_precision >= seen
            seen = commodity.display_precision
        assert commodity.display_precision == max(precisions)


class TestEqualityProperties:
    @FUZZ_SETTINGS
    @given(literals(), literals(), SYMBOLS)
    def test_exact_equality_implies_display_equality(self, left, right, symbol):
        a = Amount.of(left, symbol)
        b = Amount.of(right, symbol)
        if equals_exact(a, b):
            assert equals(a, b)

    @FUZZ_SETTINGS
    @given(amounts())
    def test_value_equals_itself(self, a):
        assert equals_exact(a, a)
        assert equals(a, a)


class TestAdditiveProperties:
    @FUZZ_SETTINGS
    @given(amounts())
    def test_zero_is_identity(self, a):
        assert equals_exact(add(a, 0), a)
        assert equals_exact(add(0, a), a)

    @FUZZ_SETTINGS
    @given(amounts())
    def test_self_subtraction_is_zero(self, a):
        assert is_zero(subtract(a, a), exact=True)

    @FUZZ_SETTINGS
    @given(literals(), literals(), SYMBOLS)
    def test_add_then_subtract_restores(self, left, right, symbol):
        a = Amount.of(left, symbol)
        b = Amount.of(right, symbol)
        assert equals_exact(subtract(add(a, b), b), a)

    @FUZZ_SETTINGS
    @given(amounts(), amounts())
    def test_addition_commutes(self, a, b):
        assert equals_exact(add(a, b), add(b, a))

    @FUZZ_SETTINGS
    @given(literals(), literals(), SYMBOLS)
    def test_add_precision_is_maximum(self, left, right, symbol):
        a = Amount.of(left, symbol)
        b = Amount.of(right, symbol)
        assert add(a, b).precision == max(a.precision, b.precision)


class TestBalanceProperties:
    @FUZZ_SETTINGS
    @given(literals().filter(lambda d: d != 0), literals().filter(lambda d: d != 0))
    def test_cancelled_balance_collapses_to_zero(self, dollars, euros):
        a = Amount.of(dollars, "$")
        b = Amount.of(euros, "EUR")
        balance = add(a, b)
        assert isinstance(balance, Balance)

        result = subtract(subtract(balance, a), b)

        assert result == 0
        assert isinstance(result, int)

    @FUZZ_SETTINGS
    @given(st.lists(amounts(), min_size=1, max_size=8))
    def test_balance_never_holds_zero(self, values):
        total = values[0]
        for value in values[1:]:
            total = add(total, value)
        if isinstance(total, Balance):
            assert all(entry.quantity != 0 for entry in total)
            assert len({entry.commodity for entry in total}) == len(total)


class TestScalingProperties:
    @FUZZ_SETTINGS
    @given(amounts(), st.integers(min_value=-1000, max_value=1000))
    def test_multiply_by_integer_scales_quantity(self, a, factor):
        product = multiply(a, factor)
        assert product.quantity == a.quantity * factor
        assert product.commodity is a.commodity
        assert product.precision == a.precision

    @FUZZ_SETTINGS
    @given(literals(), literals(), SYMBOLS)
    def test_multiply_precision_is_sum(self, left, right, symbol):
        a = Amount.of(left, symbol)
        b = Amount.of(right, symbol)
        assert multiply(a, b).precision == a.precision + b.precision

    @FUZZ_SETTINGS
    @given(
        st.lists(literals(max_places=4), min_size=1, max_size=6),
        st.integers(min_value=1, max_value=997),
    )
    def test_reused_quotients_never_widen_display(self, values, divisor):
        quotients = [divide(Amount.of(value, "QT"), divisor) for value in values]
        total = quotients[0]
        for quotient in quotients[1:]:
            total = add(multiply(total, 2), quotient)
        assert get_registry().intern("QT").display_precision <= 4
