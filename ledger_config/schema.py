"""
LedgerConfiguration schema.

Typed form of a configuration YAML file. The loader parses YAML into
these frozen dataclasses; bridges translate them into kernel inputs.
"""

from __future__ import annotations

from dataclasses import dataclass, field


class ConfigurationError(ValueError):
    """Configuration file is structurally invalid.

    Attributes:
        source: Path (or description) of the offending configuration.
        errors: Every problem found, not just the first.
    """

    code: str = "INVALID_CONFIGURATION"

    def __init__(self, source: str, errors: list[str]):
        self.source = source
        self.errors = tuple(errors)
        super().__init__(
            f"Configuration validation failed for {source}:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


@dataclass(frozen=True)
class InvariantSettings:
    """Optional validation-engine checks."""

    enforce_future_timestamp: bool = True
    enforce_non_negative_balance: bool = False


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "INFO"


@dataclass(frozen=True)
class LedgerConfiguration:
    """A loaded, validated configuration set."""

    config_id: str
    version: int
    invariants: InvariantSettings = field(default_factory=InvariantSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    checksum: str = ""
