"""
Tests for ledger configuration loading and the config -> kernel bridges.
"""

import logging

import pytest
import yaml

from ledger_config import DEFAULT_CONFIG_PATH, ConfigurationError, get_active_config
from ledger_config.bridges import apply_logging, build_invariant_policy, log_level
from ledger_config.loader import compute_checksum, load_yaml_file, parse_configuration
from ledger_kernel.domain.ledger_invariant import DEFAULT_POLICY, InvariantPolicy
from ledger_kernel.logging_config import reset_logging


def _write(tmp_path, text, name="ledger.yaml"):
    path = tmp_path / name
    path.write_text(text)
    return path


VALID = {
    "config_id": "strict-cash",
    "version": 2,
    "invariants": {
        "enforce_future_timestamp": True,
        "enforce_non_negative_balance": True,
    },
    "logging": {"level": "debug"},
}


class TestDefaultConfiguration:
    def test_packaged_default_loads(self):
        config = get_active_config()
        assert config.config_id == "ledger-default"
        assert config.version == 1
        assert config.logging.level == "INFO"
        assert len(config.checksum) == 64

    def test_default_matches_kernel_default_policy(self):
        assert build_invariant_policy(get_active_config()) == DEFAULT_POLICY

    def test_default_path_exists(self):
        assert DEFAULT_CONFIG_PATH.is_file()

    def test_load_is_logged(self, captured_logs):
        get_active_config()
        records = [r for r in captured_logs() if r["message"] == "ledger_config_loaded"]
        assert records[0]["config_id"] == "ledger-default"
        assert records[0]["enforce_non_negative_balance"] is False


class TestParsing:
    def test_valid_mapping(self):
        config = parse_configuration(VALID)
        assert config.config_id == "strict-cash"
        assert config.version == 2
        assert config.invariants.enforce_non_negative_balance is True
        assert config.logging.level == "DEBUG"

    def test_sections_optional(self):
        config = parse_configuration({"config_id": "bare", "version": 1})
        assert config.invariants.enforce_future_timestamp is True
        assert config.invariants.enforce_non_negative_balance is False
        assert config.logging.level == "INFO"

    def test_all_errors_reported(self):
        bad = {
            "config_id": "",
            "version": 0,
            "invariants": {"enforce_future_timestamp": "yes", "enforce_everything": True},
            "logging": {"level": "LOUD"},
            "extras": 1,
        }
        with pytest.raises(ConfigurationError) as exc_info:
            parse_configuration(bad, source="bad.yaml")
        errors = exc_info.value.errors
        assert "unknown key 'extras'" in errors
        assert "config_id must be a non-empty string" in errors
        assert "version must be a positive integer" in errors
        assert "invariants.enforce_future_timestamp must be true or false" in errors
        assert "unknown key 'invariants.enforce_everything'" in errors
        assert any(e.startswith("logging.level") for e in errors)
        assert exc_info.value.source == "bad.yaml"
        assert exc_info.value.code == "INVALID_CONFIGURATION"

    def test_boolean_version_rejected(self):
        with pytest.raises(ConfigurationError):
            parse_configuration({"config_id": "x", "version": True})

    def test_checksum_is_order_independent(self):
        reordered = dict(reversed(list(VALID.items())))
        assert compute_checksum(VALID) == compute_checksum(reordered)
        assert compute_checksum(VALID) != compute_checksum({**VALID, "version": 3})


class TestYamlFiles:
    def test_load_from_file(self, tmp_path):
        path = _write(tmp_path, yaml.safe_dump(VALID))
        config = get_active_config(path)
        assert config.config_id == "strict-cash"
        assert config.checksum == compute_checksum(VALID)

    def test_empty_file_is_empty_mapping(self, tmp_path):
        assert load_yaml_file(_write(tmp_path, "")) == {}

    def test_non_mapping_rejected(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_yaml_file(_write(tmp_path, "- a\n- b\n"))

    def test_invalid_yaml_propagates(self, tmp_path):
        with pytest.raises(yaml.YAMLError):
            load_yaml_file(_write(tmp_path, "config_id: [unclosed\n"))

    def test_missing_file_propagates(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_active_config(tmp_path / "absent.yaml")


class TestBridges:
    def test_policy_from_config(self):
        policy = build_invariant_policy(parse_configuration(VALID))
        assert policy == InvariantPolicy(
            enforce_future_timestamp=True, enforce_non_negative_balance=True
        )

    def test_log_level(self):
        assert log_level(parse_configuration(VALID)) == logging.DEBUG

    def test_apply_logging(self):
        reset_logging()
        try:
            handler = logging.NullHandler()
            apply_logging(parse_configuration(VALID), handler=handler)
            kernel_logger = logging.getLogger("ledger_kernel")
            assert kernel_logger.level == logging.DEBUG
            assert handler in kernel_logger.handlers
        finally:
            reset_logging()
