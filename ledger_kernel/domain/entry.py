"""
LedgerEntry -- immutable record of one debit or credit against one account.

Construction validates every field and rejects entries dated after "now"
(read from the supplied Clock, SystemClock by default). Once built an
entry is a pure value; its identity is its LedgerEntryId.
"""

from __future__ import annotations

from dataclasses import InitVar, dataclass
from datetime import datetime
from enum import Enum

from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.domain.identifiers import AccountId, IdentifierSource, LedgerEntryId
from ledger_kernel.domain.values import Money
from ledger_kernel.exceptions import InvalidEntryError


class EntrySide(str, Enum):
    DEBIT = "debit"
    CREDIT = "credit"

    def opposite(self) -> EntrySide:
        return EntrySide.CREDIT if self is EntrySide.DEBIT else EntrySide.DEBIT


_SYSTEM_CLOCK = SystemClock()


@dataclass(frozen=True, slots=True)
class LedgerEntry:
    """
    A single posting line.

    Guarantees:
        - All five fields are present and of the right type.
        - occurred_at is timezone-aware and not after the construction-time
          "now" of ``clock``.
    """

    id: LedgerEntryId
    account_id: AccountId
    amount: Money
    occurred_at: datetime
    side: EntrySide
    clock: InitVar[Clock | None] = None

    def __post_init__(self, clock: Clock | None) -> None:
        _require(self.id, LedgerEntryId, "id")
        _require(self.account_id, AccountId, "account_id")
        _require(self.amount, Money, "amount")
        _require(self.occurred_at, datetime, "occurred_at")
        _require(self.side, EntrySide, "side")

        if self.occurred_at.tzinfo is None or self.occurred_at.utcoffset() is None:
            raise InvalidEntryError("occurred_at", "must be timezone-aware")
        now = (clock or _SYSTEM_CLOCK).now()
        if self.occurred_at > now:
            raise InvalidEntryError(
                "occurred_at",
                f"LedgerEntry cannot occur in the future ({self.occurred_at.isoformat()} > {now.isoformat()})",
            )

    @classmethod
    def create(
        cls,
        account_id: AccountId,
        amount: Money,
        side: EntrySide,
        *,
        occurred_at: datetime | None = None,
        clock: Clock | None = None,
        id_source: IdentifierSource | None = None,
    ) -> LedgerEntry:
        """Build an entry with a fresh id; ``occurred_at`` defaults to now."""
        clock = clock or _SYSTEM_CLOCK
        return cls(
            id=LedgerEntryId.new_id(id_source),
            account_id=account_id,
            amount=amount,
            occurred_at=occurred_at if occurred_at is not None else clock.now(),
            side=side,
            clock=clock,
        )

    def reversal(
        self,
        occurred_at: datetime,
        *,
        clock: Clock | None = None,
        id_source: IdentifierSource | None = None,
    ) -> LedgerEntry:
        """Mirror entry: fresh id, same account and amount, opposite side."""
        return LedgerEntry(
            id=LedgerEntryId.new_id(id_source),
            account_id=self.account_id,
            amount=self.amount,
            occurred_at=occurred_at,
            side=self.side.opposite(),
            clock=clock,
        )

    @property
    def currency(self) -> str:
        return self.amount.currency.code


def _require(value: object, expected: type, field: str) -> None:
    if value is None:
        raise InvalidEntryError(field, "is required")
    if not isinstance(value, expected):
        raise InvalidEntryError(
            field, f"must be {expected.__name__}, got {type(value).__name__}"
        )
