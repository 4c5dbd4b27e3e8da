"""
Tests for ledger_kernel.logging_config.

Records are read back as parsed JSON lines from a StringIO handed to
configure_logging().
"""

import json
import logging
from io import StringIO

import pytest

from ledger_kernel.domain.entry import EntrySide
from ledger_kernel.domain.identifiers import AccountId, TransactionId
from ledger_kernel.domain.values import Money
from ledger_kernel.exceptions import DuplicateEntryIdError, UnbalancedTransactionError
from ledger_kernel.logging_config import (
    LOGGER_NAME,
    JsonLogFormatter,
    LogContext,
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture
def kernel_log():
    """Fresh kernel logger writing to a buffer; call the fixture to read lines."""
    reset_logging()
    buffer = StringIO()
    configure_logging(level=logging.DEBUG, stream=buffer)

    def _lines() -> list[dict]:
        return [json.loads(line) for line in buffer.getvalue().splitlines()]

    yield _lines
    reset_logging()


class TestLineShape:
    def test_header_fields(self, kernel_log):
        get_logger("domain.transaction").info("transaction_posted")
        (line,) = kernel_log()
        assert list(line)[:4] == ["time", "level", "logger", "message"]
        assert line["level"] == "INFO"
        assert line["logger"] == "ledger_kernel.domain.transaction"
        assert line["message"] == "transaction_posted"
        assert line["time"].endswith("+00:00")

    def test_extras_rendered_with_canonical_text(self, kernel_log):
        account_id = AccountId.new_id()
        get_logger("services.posting").info(
            "entry_recorded",
            extra={
                "entry_count": 2,
                "account": account_id,
                "amount": Money.of("12.5", "USD"),
                "side": EntrySide.CREDIT,
            },
        )
        (line,) = kernel_log()
        assert line["entry_count"] == 2
        assert line["account"] == str(account_id)
        assert line["amount"] == "12.50 USD"
        assert line["side"] == "credit"

    def test_record_internals_not_leaked(self, kernel_log):
        get_logger("t").warning("plain")
        (line,) = kernel_log()
        assert set(line) == {"time", "level", "logger", "message"}

    def test_kernel_error_nested_under_error(self, kernel_log):
        try:
            raise UnbalancedTransactionError("tx-1", "10.00", "9.00", "USD")
        except UnbalancedTransactionError:
            get_logger("t").exception("post_failed")
        (line,) = kernel_log()
        assert line["level"] == "ERROR"
        assert line["error"]["type"] == "UnbalancedTransactionError"
        assert line["error"]["code"] == "UNBALANCED_TRANSACTION"
        assert line["error"]["debits"] == "10.00"
        assert line["error"]["credits"] == "9.00"
        assert "Traceback" in line["traceback"]

    def test_invariant_error_kind_is_its_value(self, kernel_log):
        try:
            raise DuplicateEntryIdError("e-1")
        except DuplicateEntryIdError:
            get_logger("t").error("rejected", exc_info=True)
        (line,) = kernel_log()
        assert line["error"]["kind"] == "DUPLICATE_ENTRY_ID"
        assert line["error"]["entry_id"] == "e-1"

    def test_formatter_works_without_configure(self):
        record = logging.makeLogRecord({"msg": "bare", "levelname": "DEBUG", "name": "x"})
        assert json.loads(JsonLogFormatter().format(record))["message"] == "bare"


class TestLogContext:
    def test_bound_ids_appear_on_lines(self, kernel_log):
        tx_id = TransactionId.new_id()
        with LogContext.bind(transaction_id=tx_id, correlation_id="req-7"):
            get_logger("t").info("inside")
        get_logger("t").info("outside")
        inside, outside = kernel_log()
        assert inside["transaction_id"] == str(tx_id)
        assert inside["correlation_id"] == "req-7"
        assert "transaction_id" not in outside

    def test_nested_bind_merges_then_restores(self):
        with LogContext.bind(transaction_id="t-1"):
            with LogContext.bind(account_id="a-1", transaction_id="t-2"):
                assert LogContext.current() == {"transaction_id": "t-2", "account_id": "a-1"}
            assert LogContext.current() == {"transaction_id": "t-1"}
        assert LogContext.current() == {}

    def test_restored_when_block_raises(self):
        with pytest.raises(RuntimeError):
            with LogContext.bind(account_id="a-1"):
                raise RuntimeError("boom")
        assert LogContext.current() == {}

    def test_none_values_skipped(self):
        with LogContext.bind(transaction_id=None, account_id="a-1"):
            assert LogContext.current() == {"account_id": "a-1"}

    def test_unknown_field_rejected(self):
        with pytest.raises(TypeError, match="actor"):
            with LogContext.bind(actor="nobody"):
                pass

    def test_current_is_a_copy(self):
        with LogContext.bind(account_id="a-1"):
            LogContext.current()["account_id"] = "changed"
            assert LogContext.current() == {"account_id": "a-1"}

    def test_explicit_extra_does_not_override_bound_id(self, kernel_log):
        with LogContext.bind(transaction_id="bound"):
            get_logger("t").info("evt", extra={"transaction_id": "extra"})
        (line,) = kernel_log()
        assert line["transaction_id"] == "bound"


class TestConfigureLogging:
    def test_second_call_is_a_no_op(self, kernel_log):
        kernel = logging.getLogger(LOGGER_NAME)
        assert configure_logging(handler=logging.NullHandler()) is False
        assert len(kernel.handlers) == 1
        assert kernel.level == logging.DEBUG

    def test_installed_handler_gets_json_formatter(self):
        reset_logging()
        handler = logging.NullHandler()
        try:
            assert configure_logging(handler=handler) is True
            assert isinstance(handler.formatter, JsonLogFormatter)
            assert logging.getLogger(LOGGER_NAME).propagate is False
        finally:
            reset_logging()

    def test_foreign_handler_does_not_block_configure(self):
        reset_logging()
        kernel = logging.getLogger(LOGGER_NAME)
        foreign = logging.NullHandler()
        kernel.addHandler(foreign)
        try:
            assert configure_logging(handler=logging.NullHandler()) is True
            assert len(kernel.handlers) == 2
        finally:
            reset_logging()

    def test_level_filters_lines(self, kernel_log):
        logging.getLogger(LOGGER_NAME).setLevel(logging.WARNING)
        logger = get_logger("t")
        logger.info("dropped")
        logger.warning("kept")
        assert [line["message"] for line in kernel_log()] == ["kept"]

    def test_reset_then_reconfigure(self):
        configure_logging(handler=logging.NullHandler())
        reset_logging()
        kernel = logging.getLogger(LOGGER_NAME)
        assert kernel.handlers == []
        assert kernel.propagate is True
        assert kernel.level == logging.NOTSET
        assert configure_logging(handler=logging.NullHandler()) is True
        reset_logging()

    def test_get_logger_namespace(self):
        assert get_logger("services.posting").name == "ledger_kernel.services.posting"
