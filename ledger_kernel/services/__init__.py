"""
Ledger kernel services -- the imperative shell around the pure domain.

Services reach storage only through the ports they are constructed with.
"""

from ledger_kernel.services.balance import account_balance, signed_amount
from ledger_kernel.services.ports import (
    AccountRepository,
    EntryHistorySource,
    InMemoryAccountRepository,
    InMemoryEntryHistory,
)
from ledger_kernel.services.posting_service import LedgerPostingService

__all__ = [
    "AccountRepository",
    "EntryHistorySource",
    "InMemoryAccountRepository",
    "InMemoryEntryHistory",
    "LedgerPostingService",
    "account_balance",
    "signed_amount",
]
