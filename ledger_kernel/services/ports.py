"""
Ports -- boundary contracts with storage collaborators.

The kernel never performs storage I/O. A surrounding service supplies an
AccountRepository and an EntryHistorySource; the in-memory adapters here
serve embedding, demos and tests.
"""

from __future__ import annotations

import threading
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from ledger_kernel.domain.account import Account
from ledger_kernel.domain.entry import LedgerEntry
from ledger_kernel.domain.identifiers import AccountId


@runtime_checkable
class AccountRepository(Protocol):
    """Looks up Account aggregates by id."""

    def get(self, account_id: AccountId) -> Account | None:
        """Return the account, or None when it does not exist."""
        ...


@runtime_checkable
class EntryHistorySource(Protocol):
    """Ordered entry history per account."""

    def entries_for(self, account_id: AccountId) -> Sequence[LedgerEntry]:
        """Entries already recorded against ``account_id``, oldest first."""
        ...

    def append(self, entry: LedgerEntry) -> None:
        """Record an entry that has passed validation."""
        ...


class InMemoryAccountRepository:
    def __init__(self, accounts: Sequence[Account] = ()):
        self._accounts: dict[AccountId, Account] = {a.id: a for a in accounts}
        self._lock = threading.Lock()

    def add(self, account: Account) -> None:
        with self._lock:
            self._accounts[account.id] = account

    def get(self, account_id: AccountId) -> Account | None:
        with self._lock:
            return self._accounts.get(account_id)


class InMemoryEntryHistory:
    def __init__(self) -> None:
        self._by_account: dict[AccountId, list[LedgerEntry]] = {}
        self._lock = threading.Lock()

    def entries_for(self, account_id: AccountId) -> tuple[LedgerEntry, ...]:
        with self._lock:
            return tuple(self._by_account.get(account_id, ()))

    def append(self, entry: LedgerEntry) -> None:
        with self._lock:
            self._by_account.setdefault(entry.account_id, []).append(entry)
