"""Tests for normal-balance aware account balances."""

import pytest

from ledger_kernel.domain.account import AccountType
from ledger_kernel.domain.entry import EntrySide
from ledger_kernel.domain.values import Money
from ledger_kernel.exceptions import CurrencyMismatchError
from ledger_kernel.services.balance import account_balance, signed_amount


class TestSignedAmount:
    @pytest.mark.parametrize(
        "account_type, side, expected",
        [
            (AccountType.ASSET, EntrySide.DEBIT, "10.00"),
            (AccountType.ASSET, EntrySide.CREDIT, "-10.00"),
            (AccountType.EXPENSE, EntrySide.DEBIT, "10.00"),
            (AccountType.LIABILITY, EntrySide.CREDIT, "10.00"),
            (AccountType.LIABILITY, EntrySide.DEBIT, "-10.00"),
            (AccountType.EQUITY, EntrySide.CREDIT, "10.00"),
            (AccountType.REVENUE, EntrySide.DEBIT, "-10.00"),
        ],
    )
    def test_sign_follows_normal_balance(self, make_entry, account_type, side, expected):
        entry = make_entry("10.00", side)
        assert signed_amount(entry, account_type) == Money.of(expected, "USD")


class TestAccountBalance:
    def test_no_entries_is_zero(self):
        assert account_balance(AccountType.ASSET, [], "USD") == Money.zero("USD")

    def test_asset_balance(self, make_entry):
        entries = [
            make_entry("100.00", EntrySide.DEBIT),
            make_entry("30.00", EntrySide.CREDIT),
            make_entry("5.25", EntrySide.DEBIT),
        ]
        assert account_balance(AccountType.ASSET, entries, "USD") == Money.of("75.25", "USD")

    def test_revenue_balance(self, make_entry):
        entries = [make_entry("40.00", EntrySide.CREDIT), make_entry("15.00", EntrySide.DEBIT)]
        assert account_balance(AccountType.REVENUE, entries, "USD") == Money.of("25.00", "USD")

    def test_overdrawn_asset_is_negative(self, make_entry):
        entries = [make_entry("1.00", EntrySide.CREDIT)]
        assert account_balance(AccountType.ASSET, entries, "USD").is_negative

    def test_wrong_currency_rejected(self, make_entry):
        with pytest.raises(CurrencyMismatchError):
            account_balance(AccountType.ASSET, [make_entry(currency="EUR")], "USD")
