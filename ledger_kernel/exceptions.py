"""
Typed Exception Hierarchy for the Ledger Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Every rejection the kernel produces must be distinguishable by type, not by
message text. An API layer translating "duplicate entry" into one response
and "wrong currency" into another must be able to do so with an except
clause or a lookup on ``code``.

  1. Every error has a TYPED exception class (catch by type, not message)
  2. Every exception has a CODE attribute (machine-readable, API-safe)
  3. Exceptions carry structured DATA (not just a message string)

    try:
        transaction.add_entry(entry)
    except DuplicateEntryIdError as e:
        return api_response(code=e.code, entry_id=e.entry_id)
    except InvariantViolationError as e:
        return api_response(code=e.code, kind=e.kind.value)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    LedgerKernelError (base)
    |
    +-- MoneyError
    |   +-- InvalidAmountError
    |   +-- InvalidCurrencyError
    |   +-- CurrencyMismatchError
    |
    +-- IdentifierError
    |   +-- MalformedIdentifierError
    |
    +-- AccountError
    |   +-- InvalidAccountNameError
    |   +-- InvalidStateTransitionError
    |   +-- AccountNotPostableError
    |   +-- AccountNotFoundError
    |
    +-- EntryError
    |   +-- InvalidEntryError
    |
    +-- InvariantViolationError
    |   +-- CurrencyInconsistencyError
    |   +-- DuplicateEntryIdError
    |   +-- FutureTimestampError
    |   +-- NegativeBalanceError
    |
    +-- TransactionError
        +-- TransactionAlreadyPostedError
        +-- UnbalancedTransactionError
        +-- TransactionNotPostedError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category     | Code                       | When Raised
-------------|----------------------------|------------------------------------
Money        | INVALID_AMOUNT             | Too many decimals / float / NaN
             | INVALID_CURRENCY           | Not a known ISO 4217 code
             | CURRENCY_MISMATCH          | Arithmetic across currencies
-------------|----------------------------|------------------------------------
Identifier   | MALFORMED_IDENTIFIER       | String is not a canonical UUID
-------------|----------------------------|------------------------------------
Account      | INVALID_ACCOUNT_NAME       | Blank account name
             | INVALID_STATE_TRANSITION   | Freeze closed / close frozen
             | ACCOUNT_NOT_POSTABLE       | Posting to FROZEN or CLOSED account
             | ACCOUNT_NOT_FOUND          | Repository has no such account
-------------|----------------------------|------------------------------------
Entry        | INVALID_ENTRY              | Missing field / future / naive time
-------------|----------------------------|------------------------------------
Invariant    | CURRENCY_INCONSISTENCY     | Entry currency differs from ledger
             | DUPLICATE_ENTRY_ID         | Entry id already present
             | FUTURE_TIMESTAMP           | Entry occurred after "now"
             | NEGATIVE_BALANCE           | Running balance below zero (opt-in)
-------------|----------------------------|------------------------------------
Transaction  | TRANSACTION_ALREADY_POSTED | Mutating a posted transaction
             | UNBALANCED_TRANSACTION     | Debits != Credits at post()
             | TRANSACTION_NOT_POSTED     | Reversing an unposted transaction

===============================================================================
"""

from __future__ import annotations

from ledger_kernel.invariants import ViolationKind


class LedgerKernelError(Exception):
    """
    Base exception for all ledger kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "LEDGER_KERNEL_ERROR"


# Money-related exceptions


class MoneyError(LedgerKernelError):
    """Base exception for amount and currency errors."""

    code: str = "MONEY_ERROR"


class InvalidAmountError(MoneyError):
    """Amount is not an exact decimal at the currency's precision."""

    code: str = "INVALID_AMOUNT"

    def __init__(self, amount: str, currency: str, reason: str):
        self.amount = amount
        self.currency = currency
        self.reason = reason
        super().__init__(f"Invalid amount {amount} for {currency}: {reason}")


class InvalidCurrencyError(MoneyError):
    """Invalid ISO 4217 currency code provided."""

    code: str = "INVALID_CURRENCY"

    def __init__(self, currency: str):
        self.currency = currency
        super().__init__(f"Invalid ISO 4217 currency code: '{currency}'")


class CurrencyMismatchError(MoneyError):
    """Attempted arithmetic on mismatched currencies."""

    code: str = "CURRENCY_MISMATCH"

    def __init__(self, currency1: str, currency2: str):
        self.currency1 = currency1
        self.currency2 = currency2
        super().__init__(f"Currency mismatch: {currency1} vs {currency2}")


# Identifier exceptions


class IdentifierError(LedgerKernelError):
    """Base exception for identifier errors."""

    code: str = "IDENTIFIER_ERROR"


class MalformedIdentifierError(IdentifierError):
    """String input is not a canonical identifier."""

    code: str = "MALFORMED_IDENTIFIER"

    def __init__(self, kind: str, value: object):
        self.kind = kind
        self.value = value
        super().__init__(f"Malformed {kind}: {value!r}")


# Account-related exceptions


class AccountError(LedgerKernelError):
    """Base exception for account-related errors."""

    code: str = "ACCOUNT_ERROR"


class InvalidAccountNameError(AccountError):
    """Account name is empty or blank."""

    code: str = "INVALID_ACCOUNT_NAME"

    def __init__(self, name: object):
        self.name = name
        super().__init__("Account name cannot be empty")


class InvalidStateTransitionError(AccountError):
    """Account lifecycle transition is not allowed from the current status."""

    code: str = "INVALID_STATE_TRANSITION"

    def __init__(self, account_id: str, from_status: str, to_status: str):
        self.account_id = account_id
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Account {account_id} cannot move from {from_status} to {to_status}"
        )


class AccountNotPostableError(AccountError):
    """Account status does not accept postings."""

    code: str = "ACCOUNT_NOT_POSTABLE"

    def __init__(self, account_id: str, status: str):
        self.account_id = account_id
        self.status = status
        super().__init__(
            f"Cannot post to account {account_id} with status: {status}"
        )


class AccountNotFoundError(AccountError):
    """Account was not found."""

    code: str = "ACCOUNT_NOT_FOUND"

    def __init__(self, account_id: str):
        self.account_id = account_id
        super().__init__(f"Account not found: {account_id}")


# Entry exceptions


class EntryError(LedgerKernelError):
    """Base exception for ledger entry errors."""

    code: str = "ENTRY_ERROR"


class InvalidEntryError(EntryError):
    """Ledger entry failed construction-time validation."""

    code: str = "INVALID_ENTRY"

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid ledger entry ({field}): {reason}")


# Invariant violations


class InvariantViolationError(LedgerKernelError):
    """
    Base exception for ledger-consistency rejections.

    Subclasses correspond one-to-one with ViolationKind members; ``kind``
    is always set.
    """

    code: str = "INVARIANT_VIOLATION"
    kind: ViolationKind

    def __init__(self, message: str):
        super().__init__(message)


class CurrencyInconsistencyError(InvariantViolationError):
    """Entry currency differs from the currency already in use."""

    code: str = ViolationKind.CURRENCY_INCONSISTENCY.value
    kind = ViolationKind.CURRENCY_INCONSISTENCY

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"All ledger entries must use the same currency: "
            f"expected {expected}, got {actual}"
        )


class DuplicateEntryIdError(InvariantViolationError):
    """Entry id is already present."""

    code: str = ViolationKind.DUPLICATE_ENTRY_ID.value
    kind = ViolationKind.DUPLICATE_ENTRY_ID

    def __init__(self, entry_id: str):
        self.entry_id = entry_id
        super().__init__(f"Duplicate ledger entry ID: {entry_id}")


class FutureTimestampError(InvariantViolationError):
    """Entry timestamp is after the validation-time "now"."""

    code: str = ViolationKind.FUTURE_TIMESTAMP.value
    kind = ViolationKind.FUTURE_TIMESTAMP

    def __init__(self, occurred_at: str, now: str):
        self.occurred_at = occurred_at
        self.now = now
        super().__init__(
            f"Ledger entry timestamp cannot be in the future: {occurred_at} > {now}"
        )


class NegativeBalanceError(InvariantViolationError):
    """Running balance would become negative."""

    code: str = ViolationKind.NEGATIVE_BALANCE.value
    kind = ViolationKind.NEGATIVE_BALANCE

    def __init__(self, balance: str, currency: str):
        self.balance = balance
        self.currency = currency
        super().__init__(f"Ledger balance cannot be negative: {balance} {currency}")


# Transaction state-machine exceptions


class TransactionError(LedgerKernelError):
    """Base exception for transaction state-machine errors."""

    code: str = "TRANSACTION_ERROR"


class TransactionAlreadyPostedError(TransactionError):
    """Posted transactions are immutable."""

    code: str = "TRANSACTION_ALREADY_POSTED"

    def __init__(self, transaction_id: str):
        self.transaction_id = transaction_id
        super().__init__(
            f"Cannot modify posted transaction: {transaction_id}"
        )


class UnbalancedTransactionError(TransactionError):
    """Transaction debits do not equal credits."""

    code: str = "UNBALANCED_TRANSACTION"

    def __init__(self, transaction_id: str, debits: str, credits: str, currency: str):
        self.transaction_id = transaction_id
        self.debits = debits
        self.credits = credits
        self.currency = currency
        super().__init__(
            f"Debits and credits must balance in {currency}: "
            f"debits={debits}, credits={credits}"
        )


class TransactionNotPostedError(TransactionError):
    """Only posted transactions can be reversed."""

    code: str = "TRANSACTION_NOT_POSTED"

    def __init__(self, transaction_id: str):
        self.transaction_id = transaction_id
        super().__init__(
            f"Cannot reverse an unposted transaction: {transaction_id}"
        )

