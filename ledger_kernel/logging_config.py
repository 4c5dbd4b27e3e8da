"""
Structured logging for the ledger kernel.

Every record emitted under the ``ledger_kernel`` logger renders as one
JSON object per line:

    {"time": ..., "level": ..., "logger": ..., "message": <event name>,
     <bound ledger ids>, <extra= fields>, "error": {...}, "traceback": ...}

Ledger ids (caller correlation id, transaction, account) are attached with
LogContext.bind(), so records emitted by nested kernel calls carry them
without the ids being passed down explicitly.
"""

from __future__ import annotations

import contextlib
import json
import logging
import sys
import threading
from collections.abc import Iterator
from contextvars import ContextVar
from datetime import UTC, datetime
from enum import Enum
from typing import Any, TextIO

__all__ = [
    "LOGGER_NAME",
    "JsonLogFormatter",
    "LogContext",
    "configure_logging",
    "get_logger",
    "reset_logging",
]

LOGGER_NAME = "ledger_kernel"


class LogContext:
    """Ledger ids attached to every record emitted inside a bind() block."""

    FIELDS = ("correlation_id", "transaction_id", "account_id")

    _bound: ContextVar[dict[str, str] | None] = ContextVar(
        "ledger_log_context", default=None
    )

    @classmethod
    @contextlib.contextmanager
    def bind(cls, **ids: object) -> Iterator[None]:
        """
        Bind ledger ids for the duration of the ``with`` block.

        Ids bound by an enclosing block stay visible unless overridden.
        Values are stringified, so identifier objects can be passed as-is;
        ``None`` values are skipped.

        Raises:
            TypeError: for a name outside FIELDS.
        """
        unknown = sorted(set(ids) - set(cls.FIELDS))
        if unknown:
            raise TypeError(f"Unknown log context field(s): {', '.join(unknown)}")
        merged = cls.current()
        merged.update((name, str(value)) for name, value in ids.items() if value is not None)
        token = cls._bound.set(merged)
        try:
            yield
        finally:
            cls._bound.reset(token)

    @classmethod
    def current(cls) -> dict[str, str]:
        """Copy of the ids bound in the current context."""
        return dict(cls._bound.get() or {})

    @classmethod
    def clear(cls) -> None:
        cls._bound.set(None)


# Attributes every LogRecord has; anything else on a record came from extra=.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {
    "message",
    "asctime",
    "taskName",
}


def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    # Money, Currency, identifiers, Decimal and UUID all have canonical str().
    return str(value)


def _describe_error(exc: BaseException) -> dict[str, Any]:
    error: dict[str, Any] = {"type": type(exc).__name__, "message": str(exc)}
    for name in ("code", "kind"):
        value = getattr(exc, name, None)
        if value is not None:
            error[name] = value
    error.update(
        (name, value) for name, value in vars(exc).items() if not name.startswith("_")
    )
    return error


class JsonLogFormatter(logging.Formatter):
    """One JSON object per record: fixed header, bound ids, extras, error."""

    def format(self, record: logging.LogRecord) -> str:
        line: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        line.update(LogContext.current())
        for name, value in vars(record).items():
            if name not in _RECORD_ATTRS and name not in line:
                line[name] = value

        if record.exc_info and record.exc_info[1] is not None:
            line["error"] = _describe_error(record.exc_info[1])
            line["traceback"] = self.formatException(record.exc_info)

        return json.dumps(line, default=_jsonable)


def get_logger(name: str) -> logging.Logger:
    """Logger ``ledger_kernel.<name>``."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


_HANDLER_MARK = "_ledger_kernel_json"
_setup_lock = threading.Lock()


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: TextIO | None = None,
    handler: logging.Handler | None = None,
) -> bool:
    """
    Attach one JSON handler to the ``ledger_kernel`` logger.

    ``handler`` defaults to a StreamHandler on ``stream`` (stderr when
    omitted). The kernel logger stops propagating to the root logger.

    Returns:
        True when the handler was installed. False, with nothing changed,
        while a handler from an earlier call is still attached.
    """
    kernel = logging.getLogger(LOGGER_NAME)
    with _setup_lock:
        if any(getattr(h, _HANDLER_MARK, False) for h in kernel.handlers):
            return False
        if handler is None:
            handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(JsonLogFormatter())
        setattr(handler, _HANDLER_MARK, True)
        kernel.addHandler(handler)
        kernel.setLevel(level)
        kernel.propagate = False
    return True


def reset_logging() -> None:
    """Detach every kernel handler and restore logger defaults. For tests."""
    kernel = logging.getLogger(LOGGER_NAME)
    with _setup_lock:
        for h in list(kernel.handlers):
            kernel.removeHandler(h)
        kernel.setLevel(logging.NOTSET)
        kernel.propagate = True
