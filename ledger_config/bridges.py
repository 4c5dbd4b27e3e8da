"""
Config -> Kernel Bridges.

Functions that convert a LedgerConfiguration into kernel inputs. These
live in ledger_config because the kernel must never import ledger_config.

Usage:
    from ledger_config import get_active_config
    from ledger_config.bridges import build_invariant_policy, apply_logging

    config = get_active_config()
    apply_logging(config)
    service = LedgerPostingService(accounts, history, policy=build_invariant_policy(config))
"""

from __future__ import annotations

import logging

from ledger_config.schema import LedgerConfiguration
from ledger_kernel.domain.ledger_invariant import InvariantPolicy
from ledger_kernel.logging_config import configure_logging


def build_invariant_policy(config: LedgerConfiguration) -> InvariantPolicy:
    return InvariantPolicy(
        enforce_future_timestamp=config.invariants.enforce_future_timestamp,
        enforce_non_negative_balance=config.invariants.enforce_non_negative_balance,
    )


def log_level(config: LedgerConfiguration) -> int:
    return logging.getLevelNamesMapping()[config.logging.level]


def apply_logging(config: LedgerConfiguration, *, handler: logging.Handler | None = None) -> None:
    """Configure kernel logging at the configured level (no-op once configured)."""
    configure_logging(level=log_level(config), handler=handler)
