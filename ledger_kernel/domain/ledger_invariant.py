"""
LedgerInvariant -- validation engine for candidate ledger entries.

Responsibility:
    Decides whether a new LedgerEntry may join an existing ordered
    sequence of entries (one transaction's entries, or one account's
    history supplied by an external store).

Architecture position:
    Kernel > Domain. Pure apart from reading the injected Clock once per
    call. Used by Transaction.add_entry and by LedgerPostingService.

Checks, in order, stopping at the first failure:
    1. CURRENCY_INCONSISTENCY -- candidate currency == existing[0] currency
    2. DUPLICATE_ENTRY_ID     -- candidate id not already present
    3. FUTURE_TIMESTAMP       -- candidate occurred_at <= now
    4. NEGATIVE_BALANCE       -- running sum stays >= 0 (opt-in policy)

Failure modes:
    validate_new_entry never raises for a rule failure; it returns a
    ValidationResult carrying one InvariantViolation. ensure_valid_new_entry
    raises the matching InvariantViolationError subclass instead.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.domain.entry import LedgerEntry
from ledger_kernel.domain.values import Money
from ledger_kernel.exceptions import (
    CurrencyInconsistencyError,
    DuplicateEntryIdError,
    FutureTimestampError,
    InvariantViolationError,
    NegativeBalanceError,
)
from ledger_kernel.invariants import ViolationKind
from ledger_kernel.logging_config import get_logger

logger = get_logger("domain.ledger_invariant")

_SYSTEM_CLOCK = SystemClock()


@dataclass(frozen=True)
class InvariantPolicy:
    """
    Which optional checks run.

    The currency and duplicate-id checks always run. The future-timestamp
    check is on by default. The non-negative running balance check is off
    by default: it only makes sense for single-balance ledgers such as a
    cash account, where entry amounts are signed.
    """

    enforce_future_timestamp: bool = True
    enforce_non_negative_balance: bool = False


DEFAULT_POLICY = InvariantPolicy()


@dataclass(frozen=True)
class InvariantViolation:
    """One rejected rule, reportable by kind without raising."""

    error: InvariantViolationError

    @property
    def kind(self) -> ViolationKind:
        return self.error.kind

    @property
    def code(self) -> str:
        return self.error.code

    @property
    def message(self) -> str:
        return str(self.error)

    @property
    def details(self) -> dict[str, object]:
        """Structured fields of the error, e.g. ``{"entry_id": ...}``."""
        return dict(vars(self.error))

    def to_exception(self) -> InvariantViolationError:
        return self.error


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of validate_new_entry.

    ``bool(result)`` is ``result.is_valid``.
    """

    violation: InvariantViolation | None = None

    @classmethod
    def success(cls) -> ValidationResult:
        return cls()

    @classmethod
    def failure(cls, error: InvariantViolationError) -> ValidationResult:
        return cls(violation=InvariantViolation(error))

    @property
    def is_valid(self) -> bool:
        return self.violation is None

    def raise_if_invalid(self) -> None:
        if self.violation is not None:
            raise self.violation.to_exception()

    def __bool__(self) -> bool:
        return self.is_valid


# ---------------------------------------------------------------------------
# Individual checks
# ---------------------------------------------------------------------------


def check_same_currency(
    candidate: LedgerEntry, existing: Sequence[LedgerEntry]
) -> InvariantViolationError | None:
    if not existing:
        return None
    expected = existing[0].amount.currency
    if candidate.amount.currency != expected:
        return CurrencyInconsistencyError(expected.code, candidate.amount.currency.code)
    return None


def check_no_duplicate_id(
    candidate: LedgerEntry, existing: Sequence[LedgerEntry]
) -> InvariantViolationError | None:
    if any(entry.id == candidate.id for entry in existing):
        return DuplicateEntryIdError(str(candidate.id))
    return None


def check_not_in_future(
    candidate: LedgerEntry, now: datetime
) -> InvariantViolationError | None:
    if candidate.occurred_at > now:
        return FutureTimestampError(candidate.occurred_at.isoformat(), now.isoformat())
    return None


def check_non_negative_balance(
    candidate: LedgerEntry, existing: Sequence[LedgerEntry]
) -> InvariantViolationError | None:
    balance = Money.zero(candidate.amount.currency)
    for entry in existing:
        balance = balance.add(entry.amount)
    balance = balance.add(candidate.amount)
    if balance.is_negative:
        return NegativeBalanceError(str(balance.amount), balance.currency.code)
    return None


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def validate_new_entry(
    candidate: LedgerEntry,
    existing: Sequence[LedgerEntry],
    *,
    now: datetime | None = None,
    clock: Clock | None = None,
    policy: InvariantPolicy | None = None,
) -> ValidationResult:
    """
    Validate ``candidate`` against ``existing``.

    Preconditions:
        - ``existing`` is ordered; its first element fixes the currency.
    Postconditions:
        - Returns success, or a failure naming the first rule broken in
          check order. Nothing is mutated.

    Args:
        candidate: Entry proposed for appending.
        existing: Entries already accepted in the same scope.
        now: Reference time. When omitted it is read once from ``clock``.
        clock: Time source used when ``now`` is omitted.
        policy: Optional checks to run; DEFAULT_POLICY when omitted.
    """
    policy = policy or DEFAULT_POLICY
    if now is None:
        now = (clock or _SYSTEM_CLOCK).now()

    error = check_same_currency(candidate, existing)
    if error is None:
        error = check_no_duplicate_id(candidate, existing)
    if error is None and policy.enforce_future_timestamp:
        error = check_not_in_future(candidate, now)
    if error is None and policy.enforce_non_negative_balance:
        error = check_non_negative_balance(candidate, existing)

    if error is None:
        return ValidationResult.success()

    logger.warning(
        "invariant_violated",
        extra={
            "kind": error.kind.value,
            "entry_id": str(candidate.id),
            "existing_count": len(existing),
            "detail": str(error),
        },
    )
    return ValidationResult.failure(error)


def ensure_valid_new_entry(
    candidate: LedgerEntry,
    existing: Sequence[LedgerEntry],
    *,
    now: datetime | None = None,
    clock: Clock | None = None,
    policy: InvariantPolicy | None = None,
) -> None:
    """Like validate_new_entry, but raises the InvariantViolationError."""
    validate_new_entry(
        candidate, existing, now=now, clock=clock, policy=policy
    ).raise_if_invalid()
