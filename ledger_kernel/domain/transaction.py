"""
Transaction -- state machine that accumulates entries and posts them.

States:

    UNPOSTED --post()--> POSTED   (terminal, no rollback)

Responsibility:
    - add_entry() validates each entry against the entries already in this
      transaction (not the whole ledger; account-history validation is the
      posting service's job) and appends it.
    - post() requires total debits == total credits, then freezes the
      transaction permanently.
    - reverse() builds a new, already-posted transaction that mirrors a
      posted one with every side flipped.

Invariants enforced:
    - Entries are append-only while UNPOSTED and immutable once POSTED.
    - Debits equal credits (same currency, same amount) at posting.
    - Every operation either fully succeeds or leaves state untouched.
    - At most one mutation per instance runs at a time (per-instance lock).
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from datetime import datetime
from enum import Enum

from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.domain.entry import EntrySide, LedgerEntry
from ledger_kernel.domain.identifiers import IdentifierSource, TransactionId
from ledger_kernel.domain.ledger_invariant import (
    InvariantPolicy,
    ensure_valid_new_entry,
)
from ledger_kernel.domain.values import Currency, Money
from ledger_kernel.exceptions import (
    TransactionAlreadyPostedError,
    TransactionNotPostedError,
    UnbalancedTransactionError,
)
from ledger_kernel.logging_config import LogContext, get_logger

logger = get_logger("domain.transaction")

REVERSAL_PREFIX = "Reversal of: "


class TransactionStatus(str, Enum):
    UNPOSTED = "unposted"
    POSTED = "posted"


class Transaction:
    """
    A double-entry transaction.

    Contract:
        Created UNPOSTED with no entries. ``clock``, ``id_source`` and
        ``policy`` are injected once and reused by add_entry() and
        reverse(); a reversal inherits them from its source.

    Guarantees:
        - ``entries`` is an immutable snapshot in insertion order.
        - Once posted, add_entry() and post() raise
          TransactionAlreadyPostedError.
    """

    def __init__(
        self,
        transaction_id: TransactionId,
        description: str,
        *,
        clock: Clock | None = None,
        id_source: IdentifierSource | None = None,
        policy: InvariantPolicy | None = None,
        reversal_of: TransactionId | None = None,
    ):
        if not isinstance(transaction_id, TransactionId):
            raise TypeError(
                f"transaction_id must be TransactionId, got {type(transaction_id).__name__}"
            )
        if not isinstance(description, str):
            raise TypeError(f"description must be str, got {type(description).__name__}")
        self._id = transaction_id
        self._description = description
        self._clock = clock or SystemClock()
        self._id_source = id_source
        self._policy = policy
        self._reversal_of = reversal_of
        self._timestamp = self._clock.now()
        self._entries: list[LedgerEntry] = []
        self._status = TransactionStatus.UNPOSTED
        self._lock = threading.RLock()

    @classmethod
    def open(
        cls,
        description: str,
        *,
        clock: Clock | None = None,
        id_source: IdentifierSource | None = None,
        policy: InvariantPolicy | None = None,
    ) -> Transaction:
        """Create a transaction with a freshly generated id."""
        return cls(
            TransactionId.new_id(id_source),
            description,
            clock=clock,
            id_source=id_source,
            policy=policy,
        )

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def id(self) -> TransactionId:
        return self._id

    @property
    def description(self) -> str:
        return self._description

    @property
    def timestamp(self) -> datetime:
        return self._timestamp

    @property
    def entries(self) -> tuple[LedgerEntry, ...]:
        return tuple(self._entries)

    @property
    def status(self) -> TransactionStatus:
        return self._status

    @property
    def is_posted(self) -> bool:
        return self._status is TransactionStatus.POSTED

    @property
    def reversal_of(self) -> TransactionId | None:
        return self._reversal_of

    @property
    def currency(self) -> Currency | None:
        """Currency fixed by the first entry; None while empty."""
        entries = self._entries
        return entries[0].amount.currency if entries else None

    def total_debits(self) -> Money | None:
        """Sum of DEBIT amounts; None while the transaction has no entries."""
        return self._total(tuple(self._entries), EntrySide.DEBIT)

    def total_credits(self) -> Money | None:
        """Sum of CREDIT amounts; None while the transaction has no entries."""
        return self._total(tuple(self._entries), EntrySide.CREDIT)

    @staticmethod
    def _total(entries: tuple[LedgerEntry, ...], side: EntrySide) -> Money | None:
        if not entries:
            return None
        total = Money.zero(entries[0].amount.currency)
        for entry in entries:
            if entry.side is side:
                total = total.add(entry.amount)
        return total

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_entry(self, entry: LedgerEntry) -> None:
        """
        Append ``entry`` after validating it against this transaction.

        Raises:
            TransactionAlreadyPostedError: if the transaction is posted.
            InvariantViolationError: the specific rule the entry breaks;
                the transaction is unchanged.
        """
        with self._lock:
            if self._status is TransactionStatus.POSTED:
                raise TransactionAlreadyPostedError(str(self._id))
            ensure_valid_new_entry(
                entry, self._entries, clock=self._clock, policy=self._policy
            )
            self._entries.append(entry)

        logger.debug(
            "entry_added",
            extra={
                "transaction_id": str(self._id),
                "entry_id": str(entry.id),
                "side": entry.side.value,
                "amount": str(entry.amount),
            },
        )

    def post(
        self,
        *,
        before_commit: Callable[[tuple[LedgerEntry, ...]], None] | None = None,
    ) -> tuple[LedgerEntry, ...]:
        """
        Finalize the transaction.

        A transaction with no entries balances trivially (0 == 0) and posts.

        Args:
            before_commit: Called with the exact entries about to be posted,
                after the balance check and while the transaction is locked.
                Anything it raises aborts the post and leaves the
                transaction UNPOSTED.

        Returns:
            The posted entries. No entry can be added between the balance
            check, ``before_commit`` and the status change.

        Raises:
            TransactionAlreadyPostedError: if already posted.
            UnbalancedTransactionError: if debits != credits.
        """
        with LogContext.bind(transaction_id=self._id), self._lock:
            if self._status is TransactionStatus.POSTED:
                raise TransactionAlreadyPostedError(str(self._id))

            entries = tuple(self._entries)
            debits = self._total(entries, EntrySide.DEBIT)
            credits = self._total(entries, EntrySide.CREDIT)
            if debits != credits:
                logger.warning(
                    "unbalanced_transaction",
                    extra={
                        "sum_debit": str(debits.amount),
                        "sum_credit": str(credits.amount),
                        "currency": debits.currency.code,
                    },
                )
                raise UnbalancedTransactionError(
                    str(self._id),
                    str(debits.amount),
                    str(credits.amount),
                    debits.currency.code,
                )

            if before_commit is not None:
                before_commit(entries)

            self._status = TransactionStatus.POSTED
            logger.info(
                "transaction_posted",
                extra={
                    "entry_count": len(entries),
                    "total": str(debits) if debits is not None else None,
                    "reversal_of": str(self._reversal_of) if self._reversal_of else None,
                },
            )
        return entries

    def reverse(self, new_id: TransactionId | None = None) -> Transaction:
        """
        Build and post the reversal of this posted transaction.

        Each entry is mirrored with a fresh entry id, the same account and
        amount, the current time and the opposite side. The mirrored
        entries go through add_entry(), so the reversal's own invariants
        are checked as usual.

        Args:
            new_id: Id for the reversal; generated when omitted.

        Raises:
            TransactionNotPostedError: if this transaction is not posted.
        """
        with self._lock:
            if self._status is not TransactionStatus.POSTED:
                raise TransactionNotPostedError(str(self._id))
            source_entries = tuple(self._entries)

        reversal = Transaction(
            new_id if new_id is not None else TransactionId.new_id(self._id_source),
            REVERSAL_PREFIX + self._description,
            clock=self._clock,
            id_source=self._id_source,
            policy=self._policy,
            reversal_of=self._id,
        )
        now = self._clock.now()
        for entry in source_entries:
            reversal.add_entry(
                entry.reversal(now, clock=self._clock, id_source=self._id_source)
            )
        reversal.post()

        logger.info(
            "transaction_reversed",
            extra={
                "transaction_id": str(self._id),
                "reversal_id": str(reversal.id),
                "entry_count": len(source_entries),
            },
        )
        return reversal

    def __repr__(self) -> str:
        return (
            f"Transaction(id={self._id}, description={self._description!r}, "
            f"status={self._status.name}, entries={len(self._entries)})"
        )
