"""
Pure domain layer.

Value objects, aggregates and the validation engine. No storage, no
network; time and identifiers come from injected sources.
"""

from ledger_kernel.domain.account import Account, AccountStatus, AccountType
from ledger_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from ledger_kernel.domain.currency import CurrencyInfo, CurrencyRegistry
from ledger_kernel.domain.entry import EntrySide, LedgerEntry
from ledger_kernel.domain.identifiers import (
    AccountId,
    IdentifierSource,
    LedgerEntryId,
    RandomIdentifierSource,
    SequentialIdentifierSource,
    TransactionId,
)
from ledger_kernel.domain.ledger_invariant import (
    DEFAULT_POLICY,
    InvariantPolicy,
    InvariantViolation,
    ValidationResult,
    ensure_valid_new_entry,
    validate_new_entry,
)
from ledger_kernel.domain.transaction import Transaction, TransactionStatus
from ledger_kernel.domain.values import Currency, Money

__all__ = [
    # Values
    "Currency",
    "Money",
    "CurrencyRegistry",
    "CurrencyInfo",
    # Identifiers
    "AccountId",
    "LedgerEntryId",
    "TransactionId",
    "IdentifierSource",
    "RandomIdentifierSource",
    "SequentialIdentifierSource",
    # Clock
    "Clock",
    "SystemClock",
    "DeterministicClock",
    # Aggregates
    "Account",
    "AccountStatus",
    "AccountType",
    "EntrySide",
    "LedgerEntry",
    "Transaction",
    "TransactionStatus",
    # Validation engine
    "DEFAULT_POLICY",
    "InvariantPolicy",
    "InvariantViolation",
    "ValidationResult",
    "validate_new_entry",
    "ensure_valid_new_entry",
]
