"""
LedgerPostingService -- wires the kernel to account and history stores.

Responsibility:
    The gate every posting passes before it reaches storage:
      1. the target account exists and is OPEN (Account.ensure_can_post)
      2. the entry is valid against the account's existing history
         (validate_new_entry)
      3. only then is the entry appended to the history source

Architecture position:
    Kernel > Services. Talks to storage only through the ports in
    ledger_kernel.services.ports.

Failure modes:
    - AccountNotFoundError: repository has no such account.
    - AccountNotPostableError: account is FROZEN or CLOSED.
    - InvariantViolationError subclasses: entry conflicts with history.
    - TransactionError subclasses: propagated from Transaction.post().
    Nothing is appended to the history when any step fails.

Concurrency:
    The service does not lock accounts across calls. Callers running it
    concurrently must serialize work per account id.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from ledger_kernel.domain.account import Account
from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.domain.entry import EntrySide, LedgerEntry
from ledger_kernel.domain.identifiers import AccountId, IdentifierSource, TransactionId
from ledger_kernel.domain.ledger_invariant import (
    InvariantPolicy,
    ValidationResult,
    ensure_valid_new_entry,
    validate_new_entry,
)
from ledger_kernel.domain.transaction import Transaction
from ledger_kernel.domain.values import Currency, Money
from ledger_kernel.exceptions import AccountNotFoundError
from ledger_kernel.logging_config import LogContext, get_logger
from ledger_kernel.services.balance import account_balance
from ledger_kernel.services.ports import AccountRepository, EntryHistorySource

logger = get_logger("services.posting")


class LedgerPostingService:
    """
    Records entries and transactions against account histories.

    Contract:
        ``accounts`` and ``history`` are external collaborators. ``clock``,
        ``id_source`` and ``policy`` are passed through to the entries and
        transactions the service creates or validates.
    """

    def __init__(
        self,
        accounts: AccountRepository,
        history: EntryHistorySource,
        *,
        clock: Clock | None = None,
        id_source: IdentifierSource | None = None,
        policy: InvariantPolicy | None = None,
    ):
        self._accounts = accounts
        self._history = history
        self._clock = clock or SystemClock()
        self._id_source = id_source
        self._policy = policy

    def get_postable_account(self, account_id: AccountId) -> Account:
        """Fetch ``account_id`` and check it accepts postings."""
        account = self._accounts.get(account_id)
        if account is None:
            raise AccountNotFoundError(str(account_id))
        account.ensure_can_post()
        return account

    def validate_against_history(self, entry: LedgerEntry) -> ValidationResult:
        """Validate ``entry`` against its account's recorded history."""
        return validate_new_entry(
            entry,
            self._history.entries_for(entry.account_id),
            clock=self._clock,
            policy=self._policy,
        )

    def record_entry(
        self,
        account_id: AccountId,
        amount: Money,
        side: EntrySide,
        occurred_at: datetime | None = None,
    ) -> LedgerEntry:
        """
        Build, validate and append a single entry.

        Used for single-balance ledgers where an entry stands alone; for
        double-entry postings use post_transaction().
        """
        with LogContext.bind(account_id=account_id):
            self.get_postable_account(account_id)
            entry = LedgerEntry.create(
                account_id,
                amount,
                side,
                occurred_at=occurred_at,
                clock=self._clock,
                id_source=self._id_source,
            )
            ensure_valid_new_entry(
                entry,
                self._history.entries_for(account_id),
                clock=self._clock,
                policy=self._policy,
            )
            self._history.append(entry)
            logger.info(
                "entry_recorded",
                extra={"entry_id": str(entry.id), "amount": str(amount), "side": side.value},
            )
        return entry

    def open_transaction(self, description: str) -> Transaction:
        """New UNPOSTED transaction sharing this service's clock, ids and policy."""
        return Transaction.open(
            description,
            clock=self._clock,
            id_source=self._id_source,
            policy=self._policy,
        )

    def post_transaction(self, transaction: Transaction) -> Transaction:
        """
        Post ``transaction`` and record its entries.

        Every referenced account must be postable and every entry must be
        valid against its account's history (including earlier entries of
        this transaction for the same account). Those checks run inside
        post(), under the transaction's lock, against the exact tuple being
        posted; that same tuple is appended once post() returns.
        """
        with LogContext.bind(transaction_id=transaction.id):
            entries = transaction.post(before_commit=self._check_entries)
            self._append_all(entries)
            logger.info(
                "transaction_recorded",
                extra={"entry_count": len(entries)},
            )
        return transaction

    def reverse_transaction(
        self, transaction: Transaction, new_id: TransactionId | None = None
    ) -> Transaction:
        """
        Reverse a posted transaction and record the reversal's entries.

        The source transaction is never changed. When the reversal fails
        validation against history, it is discarded and nothing is
        recorded.
        """
        with LogContext.bind(transaction_id=transaction.id):
            for account_id in _distinct_accounts(transaction.entries):
                self.get_postable_account(account_id)
            reversal = transaction.reverse(new_id)
            self._check_entries(reversal.entries)
            self._append_all(reversal.entries)
        return reversal

    def balance(self, account_id: AccountId, currency: str | Currency) -> Money:
        """Balance of ``account_id`` in its normal-balance orientation."""
        account = self._accounts.get(account_id)
        if account is None:
            raise AccountNotFoundError(str(account_id))
        return account_balance(
            account.account_type, self._history.entries_for(account_id), currency
        )

    def _check_entries(self, entries: tuple[LedgerEntry, ...]) -> None:
        for account_id in _distinct_accounts(entries):
            self.get_postable_account(account_id)

        pending: dict[AccountId, list[LedgerEntry]] = {}
        now = self._clock.now()
        for entry in entries:
            existing = pending.get(entry.account_id)
            if existing is None:
                existing = pending[entry.account_id] = list(
                    self._history.entries_for(entry.account_id)
                )
            ensure_valid_new_entry(entry, existing, now=now, policy=self._policy)
            existing.append(entry)

    def _append_all(self, entries: tuple[LedgerEntry, ...]) -> None:
        for entry in entries:
            self._history.append(entry)


def _distinct_accounts(entries: Iterable[LedgerEntry]) -> list[AccountId]:
    return list(dict.fromkeys(entry.account_id for entry in entries))
