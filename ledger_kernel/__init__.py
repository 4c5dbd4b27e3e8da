"""
Ledger Kernel

Invariant-enforcement core of a double-entry bookkeeping ledger:
- Exact, currency-bound Money
- Typed identifiers for accounts, entries and transactions
- Account lifecycle gating (OPEN / FROZEN / CLOSED)
- Per-entry validation engine with typed violation kinds
- Transaction state machine with atomic posting and reversal
"""

__version__ = "0.1.0"
