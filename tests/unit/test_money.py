"""
Unit tests for the Money and Currency value objects.

Verifies:
- Decimal conversion on construction
- Same-currency sums and differences
- Rounding to currency precision
"""

from decimal import Decimal

import pytest

from pm_kernel.domain.values import Currency, Money
from pm_kernel.exceptions import CurrencyMismatchError, InvalidCurrencyError


class TestCurrency:
    """Tests for the Currency value object."""

    def test_normalizes_code(self):
        assert Currency(" usd ").code == "USD"

    def test_unknown_code_raises(self):
        with pytest.raises(InvalidCurrencyError) as exc_info:
            Currency("XYZ")
        assert exc_info.value.currency == "XYZ"
        assert exc_info.value.code == "INVALID_CURRENCY"

    def test_symbol_and_places(self):
        assert Currency("EUR").symbol == "€"
        assert Currency("JPY").decimal_places == 0


class TestMoneyConstruction:

    def test_of_string(self):
        m = Money.of("100.50", "USD")

        assert m.amount == Decimal("100.50")
        assert m.currency == Currency("USD")

    def test_of_int(self):
        assert Money.of(250, "GBP").amount == Decimal("250")

    def test_string_currency_coerced(self):
        assert isinstance(Money(Decimal("1"), "CHF").currency, Currency)

    def test_invalid_amount_raises(self):
        with pytest.raises(ValueError):
            Money("not a number", "USD")

    def test_zero(self):
        assert Money.zero("USD").amount == Decimal("0")


class TestMoneyArithmetic:
    """Arithmetic keeps money paired with its currency."""

    def test_add_and_subtract(self):
        a = Money.of("10.25", "USD")
        b = Money.of("4.75", "USD")

        assert a + b == Money.of("15.00", "USD")
        assert a - b == Money.of("5.50", "USD")

    def test_mixed_currency_add_raises(self):
        with pytest.raises(CurrencyMismatchError) as exc_info:
            Money.of(1, "USD") + Money.of(1, "EUR")
        assert exc_info.value.currency1 == "USD"
        assert exc_info.value.currency2 == "EUR"

    def test_mixed_currency_subtract_raises(self):
        with pytest.raises(CurrencyMismatchError):
            Money.of(1, "USD") - Money.of(1, "EUR")

    def test_abs_and_sign(self):
        m = Money.of("-3", "USD")

        assert abs(m) == Money.of("3", "USD")
        assert m.is_negative
        assert not abs(m).is_negative


class TestMoneyRounding:

    def test_round_half_up(self):
        assert Money.of("10.555", "USD").round().amount == Decimal("10.56")

    def test_round_zero_places(self):
        assert Money.of("1234.5", "JPY").round().amount == Decimal("1235")

    def test_not_auto_rounded(self):
        assert Money.of("0.001", "USD").amount == Decimal("0.001")
