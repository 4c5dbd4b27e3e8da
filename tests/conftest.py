"""
Pytest fixtures for the ledger kernel test suite.

Provides:
- Structured logging configured once per session, LogContext cleared per test
- Deterministic clock and identifier source
- Account / entry / transaction builders
- captured_logs for asserting on emitted JSON log lines
"""

import json
import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from io import StringIO

import pytest

from ledger_kernel.domain.account import Account, AccountType
from ledger_kernel.domain.clock import DeterministicClock
from ledger_kernel.domain.entry import EntrySide, LedgerEntry
from ledger_kernel.domain.identifiers import (
    AccountId,
    LedgerEntryId,
    SequentialIdentifierSource,
)
from ledger_kernel.domain.transaction import Transaction
from ledger_kernel.domain.values import Money
from ledger_kernel.logging_config import (
    JsonLogFormatter,
    LogContext,
    configure_logging,
    reset_logging,
)

FIXED_NOW = datetime(2024, 6, 30, 12, 0, 0, tzinfo=timezone.utc)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture ledger_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, balanced_transaction):
            balanced_transaction.post()
            logs = captured_logs()
            assert any(r["message"] == "transaction_posted" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JsonLogFormatter())
    root = logging.getLogger("ledger_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Deterministic sources
# =============================================================================


@pytest.fixture
def deterministic_clock() -> DeterministicClock:
    return DeterministicClock(FIXED_NOW)


@pytest.fixture
def id_source() -> SequentialIdentifierSource:
    return SequentialIdentifierSource()


# =============================================================================
# Builders
# =============================================================================


@pytest.fixture
def usd():
    """Build USD Money from a decimal string."""

    def _usd(amount: str) -> Money:
        return Money.of(Decimal(amount), "USD")

    return _usd


@pytest.fixture
def cash_account(id_source) -> Account:
    return Account(AccountId.new_id(id_source), "Cash", AccountType.ASSET)


@pytest.fixture
def revenue_account(id_source) -> Account:
    return Account(AccountId.new_id(id_source), "Sales", AccountType.REVENUE)


@pytest.fixture
def make_entry(deterministic_clock, id_source, cash_account):
    """
    Build a LedgerEntry with sensible defaults.

    Usage::

        entry = make_entry("100.00", EntrySide.DEBIT)
        entry = make_entry("5", EntrySide.CREDIT, currency="JPY")
    """

    def _make(
        amount: str = "100.00",
        side: EntrySide = EntrySide.DEBIT,
        *,
        currency: str = "USD",
        account_id: AccountId | None = None,
        entry_id: LedgerEntryId | None = None,
        occurred_at: datetime | None = None,
    ) -> LedgerEntry:
        return LedgerEntry(
            id=entry_id or LedgerEntryId.new_id(id_source),
            account_id=account_id or cash_account.id,
            amount=Money.of(amount, currency),
            occurred_at=occurred_at or deterministic_clock.now() - timedelta(minutes=5),
            side=side,
            clock=deterministic_clock,
        )

    return _make


@pytest.fixture
def new_transaction(deterministic_clock, id_source):
    """Build an empty UNPOSTED transaction sharing the test clock and ids."""

    def _new(description: str = "Invoice payment", **kwargs) -> Transaction:
        return Transaction.open(
            description, clock=deterministic_clock, id_source=id_source, **kwargs
        )

    return _new


@pytest.fixture
def balanced_transaction(new_transaction, make_entry, cash_account, revenue_account):
    """UNPOSTED transaction: 100.00 USD debit Cash, 100.00 USD credit Sales."""
    tx = new_transaction("Cash sale")
    tx.add_entry(make_entry("100.00", EntrySide.DEBIT, account_id=cash_account.id))
    tx.add_entry(make_entry("100.00", EntrySide.CREDIT, account_id=revenue_account.id))
    return tx
