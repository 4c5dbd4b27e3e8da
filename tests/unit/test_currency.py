"""
Tests for currency validation and precision.

- Currency codes are validated against ISO 4217 at construction.
- Fraction digits come from the registry, never from a fixed constant.
"""

from decimal import Decimal

import pytest

from ledger_kernel.domain.currency import CurrencyRegistry
from ledger_kernel.domain.values import Currency
from ledger_kernel.exceptions import InvalidCurrencyError


class TestCurrencyRegistry:
    def test_valid_codes(self):
        for code in ["USD", "EUR", "GBP", "JPY", "CHF", "KWD", "CLF"]:
            assert CurrencyRegistry.is_valid(code)

    def test_invalid_codes(self):
        for code in ["XXY", "ABC", "123", "US", "USDD", "", None, 42]:
            assert not CurrencyRegistry.is_valid(code)

    def test_normalization(self):
        assert CurrencyRegistry.normalize(" usd ") == "USD"
        assert CurrencyRegistry.is_valid("eur")

    @pytest.mark.parametrize(
        "code, digits",
        [("USD", 2), ("EUR", 2), ("JPY", 0), ("KRW", 0), ("KWD", 3), ("BHD", 3), ("CLF", 4)],
    )
    def test_fraction_digits(self, code, digits):
        assert CurrencyRegistry.get_fraction_digits(code) == digits

    def test_unknown_code_has_no_digits(self):
        with pytest.raises(KeyError):
            CurrencyRegistry.get_fraction_digits("ABC")

    def test_minor_unit(self):
        assert CurrencyRegistry.get_info("USD").minor_unit == Decimal("0.01")
        assert CurrencyRegistry.get_info("JPY").minor_unit == Decimal("1")
        assert CurrencyRegistry.get_info("KWD").minor_unit == Decimal("0.001")
        assert Currency("KWD").minor_unit == Decimal("0.001")

    def test_every_code_is_three_letters(self):
        codes = CurrencyRegistry.all_codes()
        assert len(codes) > 150
        assert all(len(c) == 3 and c.isalpha() and c.isupper() for c in codes)


class TestCurrencyValue:
    def test_construct_and_normalize(self):
        assert Currency(" gbp ").code == "GBP"

    def test_invalid_code_raises_typed_error(self):
        with pytest.raises(InvalidCurrencyError) as exc_info:
            Currency("ZZZ")
        assert exc_info.value.code == "INVALID_CURRENCY"

    def test_equality_by_code(self):
        assert Currency("usd") == Currency("USD")
        assert Currency("USD") != Currency("EUR")

    def test_fraction_digits_property(self):
        assert Currency("JPY").fraction_digits == 0
