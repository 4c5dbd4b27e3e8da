"""
ledger_config -- single public entrypoint for ledger configuration.

Responsibility:
    ``get_active_config()`` is the only way runtime code obtains
    configuration. YAML parsing lives in ``ledger_config.loader``;
    translation into kernel inputs lives in ``ledger_config.bridges``.

Architecture position:
    Sits above ``ledger_kernel``. The kernel MUST NEVER import from
    ``ledger_config``.

Failure modes:
    - ``FileNotFoundError`` -- configuration file missing.
    - ``yaml.YAMLError`` -- invalid YAML syntax.
    - ``ConfigurationError`` -- schema validation failures.
"""

from __future__ import annotations

from pathlib import Path

from ledger_config.loader import load_configuration
from ledger_config.schema import (
    ConfigurationError,
    InvariantSettings,
    LedgerConfiguration,
    LoggingSettings,
)
from ledger_kernel.logging_config import get_logger

_logger = get_logger("config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"


def get_active_config(config_path: Path | None = None) -> LedgerConfiguration:
    """Load and validate the active configuration.

    Args:
        config_path: YAML file to load. Defaults to the packaged
            ``sets/default.yaml``.

    Returns:
        A frozen LedgerConfiguration carrying the source checksum.
    """
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    config = load_configuration(path)
    _logger.info(
        "ledger_config_loaded",
        extra={
            "config_id": config.config_id,
            "config_version": config.version,
            "checksum": config.checksum,
            "enforce_future_timestamp": config.invariants.enforce_future_timestamp,
            "enforce_non_negative_balance": config.invariants.enforce_non_negative_balance,
        },
    )
    return config


__all__ = [
    "ConfigurationError",
    "DEFAULT_CONFIG_PATH",
    "InvariantSettings",
    "LedgerConfiguration",
    "LoggingSettings",
    "get_active_config",
]
