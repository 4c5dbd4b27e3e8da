"""
Account -- aggregate root gating which accounts accept postings.

Lifecycle:

    OPEN --freeze()--> FROZEN --freeze()--> FROZEN   (no-op)
    OPEN --close()---> CLOSED

FROZEN -> CLOSED and any transition out of CLOSED other than a repeated
close() are rejected with InvalidStateTransitionError. Only OPEN accounts
accept postings.
"""

from __future__ import annotations

import threading
from enum import Enum

from ledger_kernel.domain.entry import EntrySide
from ledger_kernel.domain.identifiers import AccountId
from ledger_kernel.exceptions import (
    AccountNotPostableError,
    InvalidAccountNameError,
    InvalidStateTransitionError,
)
from ledger_kernel.logging_config import get_logger

logger = get_logger("domain.account")


class AccountType(str, Enum):
    """Accounting type; each type has a fixed normal balance side."""

    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSE = "expense"

    @property
    def normal_balance_side(self) -> EntrySide:
        if self in (AccountType.ASSET, AccountType.EXPENSE):
            return EntrySide.DEBIT
        return EntrySide.CREDIT

    def increases_with(self, side: EntrySide) -> bool:
        """True if an entry on ``side`` increases this account type's balance."""
        return self.normal_balance_side is side


class AccountStatus(str, Enum):
    OPEN = "open"
    FROZEN = "frozen"
    CLOSED = "closed"


class Account:
    """
    A ledger account.

    Contract:
        ``id``, ``name`` and ``account_type`` are fixed at construction;
        only ``status`` changes, and only through freeze() and close().
        Entries reference accounts by AccountId, never by object.

    Guarantees:
        - name is non-blank.
        - A rejected transition leaves status unchanged.
        - Mutations on one instance are serialized.
    """

    def __init__(self, account_id: AccountId, name: str, account_type: AccountType):
        if not isinstance(name, str) or not name.strip():
            raise InvalidAccountNameError(name)
        if not isinstance(account_id, AccountId):
            raise TypeError(f"account_id must be AccountId, got {type(account_id).__name__}")
        self._id = account_id
        self._name = name
        self._type = AccountType(account_type)
        self._status = AccountStatus.OPEN
        self._lock = threading.RLock()

    @property
    def id(self) -> AccountId:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def account_type(self) -> AccountType:
        return self._type

    @property
    def normal_balance(self) -> EntrySide:
        return self._type.normal_balance_side

    @property
    def status(self) -> AccountStatus:
        return self._status

    @property
    def can_post(self) -> bool:
        return self._status is AccountStatus.OPEN

    def freeze(self) -> None:
        with self._lock:
            if self._status is AccountStatus.CLOSED:
                raise InvalidStateTransitionError(
                    str(self._id), self._status.name, AccountStatus.FROZEN.name
                )
            previous = self._status
            self._status = AccountStatus.FROZEN
        if previous is not AccountStatus.FROZEN:
            logger.info("account_frozen", extra={"account_id": str(self._id)})

    def close(self) -> None:
        # A frozen account is never closed directly; the status must be
        # resolved explicitly first (there is no unfreeze in this model).
        with self._lock:
            if self._status is AccountStatus.FROZEN:
                raise InvalidStateTransitionError(
                    str(self._id), self._status.name, AccountStatus.CLOSED.name
                )
            previous = self._status
            self._status = AccountStatus.CLOSED
        if previous is not AccountStatus.CLOSED:
            logger.info("account_closed", extra={"account_id": str(self._id)})

    def ensure_can_post(self) -> None:
        """Raise AccountNotPostableError unless the account is OPEN."""
        status = self._status
        if status is not AccountStatus.OPEN:
            raise AccountNotPostableError(str(self._id), status.name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Account):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return (
            f"Account(id={self._id}, name={self._name!r}, "
            f"type={self._type.name}, status={self._status.name})"
        )
