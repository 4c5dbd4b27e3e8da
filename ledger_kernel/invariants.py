"""
Ledger Invariants Contract.

Declares the rules the validation engine enforces on every candidate
ledger entry, and the kernel's import boundary.

The enforcement lives in ledger_kernel.domain.ledger_invariant (per-entry
checks) and ledger_kernel.domain.transaction (balance and immutability).
"""

from enum import Enum, unique


@unique
class ViolationKind(str, Enum):
    """Kinds of ledger-consistency rejection.

    The value doubles as the machine-readable error code carried by the
    matching exception in ledger_kernel.exceptions, so callers can map a
    rejection to a specific message without parsing text.
    """

    CURRENCY_INCONSISTENCY = "CURRENCY_INCONSISTENCY"
    """Candidate entry currency differs from the first existing entry."""

    DUPLICATE_ENTRY_ID = "DUPLICATE_ENTRY_ID"
    """Candidate entry id is already present in the existing entries."""

    FUTURE_TIMESTAMP = "FUTURE_TIMESTAMP"
    """Candidate entry occurred after the validation-time "now"."""

    NEGATIVE_BALANCE = "NEGATIVE_BALANCE"
    """Running balance would go below zero. Opt-in policy only: it applies
    to single-balance ledgers (e.g. cash accounts), not to double-entry
    postings where both sides carry positive amounts."""


# Order in which validate_new_entry runs the checks (cheapest first).
CHECK_ORDER: tuple[ViolationKind, ...] = (
    ViolationKind.CURRENCY_INCONSISTENCY,
    ViolationKind.DUPLICATE_ENTRY_ID,
    ViolationKind.FUTURE_TIMESTAMP,
    ViolationKind.NEGATIVE_BALANCE,
)

# The kernel package may not import from these packages.
# This is enforced by tests/architecture/test_kernel_boundary.py.
FORBIDDEN_KERNEL_IMPORTS: tuple[str, ...] = ("ledger_config",)
