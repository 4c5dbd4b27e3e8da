"""
Configuration Loader (``ledger_config.loader``).

Responsibility
--------------
Loads a YAML configuration file and parses it into a
``ledger_config.schema.LedgerConfiguration``. Runtime callers go through
``ledger_config.get_active_config()``.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Wrong keys or value types  -> ``ConfigurationError`` listing every problem.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from ledger_config.schema import (
    ConfigurationError,
    InvariantSettings,
    LedgerConfiguration,
    LoggingSettings,
)

_TOP_LEVEL_KEYS = frozenset({"config_id", "version", "invariants", "logging"})
_INVARIANT_KEYS = frozenset(
    {"enforce_future_timestamp", "enforce_non_negative_balance"}
)
_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ConfigurationError: if the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(str(path), ["top level must be a mapping"])
    return data


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def parse_configuration(data: dict[str, Any], source: str = "<memory>") -> LedgerConfiguration:
    """
    Parse and validate a configuration mapping.

    Unknown keys are errors, so a misspelled flag never silently falls
    back to its default.
    """
    errors: list[str] = []

    for key in sorted(set(data) - _TOP_LEVEL_KEYS):
        errors.append(f"unknown key '{key}'")

    config_id = data.get("config_id")
    if not isinstance(config_id, str) or not config_id.strip():
        errors.append("config_id must be a non-empty string")

    version = data.get("version")
    if isinstance(version, bool) or not isinstance(version, int) or version < 1:
        errors.append("version must be a positive integer")

    invariants = _parse_invariants(data.get("invariants") or {}, errors)
    logging_settings = _parse_logging(data.get("logging") or {}, errors)

    if errors:
        raise ConfigurationError(source, errors)

    return LedgerConfiguration(
        config_id=config_id,
        version=version,
        invariants=invariants,
        logging=logging_settings,
        checksum=compute_checksum(data),
    )


def load_configuration(path: Path) -> LedgerConfiguration:
    return parse_configuration(load_yaml_file(path), source=str(path))


def _parse_invariants(raw: Any, errors: list[str]) -> InvariantSettings:
    if not isinstance(raw, dict):
        errors.append("invariants must be a mapping")
        return InvariantSettings()
    for key in sorted(set(raw) - _INVARIANT_KEYS):
        errors.append(f"unknown key 'invariants.{key}'")
    values: dict[str, bool] = {}
    for key in sorted(_INVARIANT_KEYS & set(raw)):
        if not isinstance(raw[key], bool):
            errors.append(f"invariants.{key} must be true or false")
        else:
            values[key] = raw[key]
    return InvariantSettings(**values)


def _parse_logging(raw: Any, errors: list[str]) -> LoggingSettings:
    if not isinstance(raw, dict):
        errors.append("logging must be a mapping")
        return LoggingSettings()
    level = raw.get("level", LoggingSettings.level)
    if not isinstance(level, str) or level.upper() not in _LOG_LEVELS:
        errors.append(f"logging.level must be one of {sorted(_LOG_LEVELS)}")
        return LoggingSettings()
    return LoggingSettings(level=level.upper())
