"""Account balances by normal balance side."""

from __future__ import annotations

from collections.abc import Iterable

from ledger_kernel.domain.account import AccountType
from ledger_kernel.domain.entry import LedgerEntry
from ledger_kernel.domain.values import Currency, Money


def signed_amount(entry: LedgerEntry, account_type: AccountType) -> Money:
    """Entry amount as it moves an account of ``account_type``.

    Positive when the entry is on the type's normal balance side
    (a debit to an ASSET, a credit to REVENUE), negative otherwise.
    """
    if account_type.increases_with(entry.side):
        return entry.amount
    return entry.amount.negate()


def account_balance(
    account_type: AccountType,
    entries: Iterable[LedgerEntry],
    currency: str | Currency,
) -> Money:
    """
    Balance of one account in its normal-balance orientation.

    Raises:
        CurrencyMismatchError: if an entry is not in ``currency``.
    """
    balance = Money.zero(currency)
    for entry in entries:
        balance = balance.add(signed_amount(entry, account_type))
    return balance
