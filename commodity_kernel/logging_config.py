"""
Structured logging for the commodity kernel.

Every kernel logger lives under the ``commodity_kernel`` namespace and
writes one JSON object per line::

    {"ts": "...", "level": "DEBUG", "logger": "commodity_kernel.domain.operations",
     "message": "balance_promoted", "operation": "add",
     "commodities": ["$", "EUR"]}

``message`` is an event name, never prose. Call-site fields travel in
``extra``. The arithmetic operation being evaluated, when one is bound with
``operation_scope``, is attached to every record emitted inside it.
"""

__all__ = [
    "StructuredFormatter",
    "configure_logging",
    "current_operation",
    "get_logger",
    "operation_scope",
    "reset_logging",
]

import json
import logging
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from decimal import Decimal
from fractions import Fraction
from typing import IO, Any

_LOGGER_PREFIX = "commodity_kernel"

_operation: ContextVar[str | None] = ContextVar("commodity_operation", default=None)


def current_operation() -> str | None:
    """The operation bound by the innermost ``operation_scope``, if any."""
    return _operation.get()


@contextmanager
def operation_scope(operation: str | None) -> Iterator[None]:
    """
    Attach ``operation`` to every record logged inside the block.

    Scopes nest; leaving one restores the enclosing operation. Binding
    ``None`` clears it for the duration of the block.
    """
    token = _operation.set(operation)
    try:
        yield
    finally:
        _operation.reset(token)


# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_KEYS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "taskName"}


def _jsonable(value: Any) -> Any:
    # exact quantities keep their text form; floats would lose digits
    if isinstance(value, (Decimal, Fraction)):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    return repr(value)


def _error_fields(exc: BaseException) -> dict[str, Any]:
    fields: dict[str, Any] = {"type": type(exc).__name__, "message": str(exc)}
    code = getattr(exc, "code", None)
    if code is not None:
        fields["code"] = code
        fields.update(
            (key, value) for key, value in vars(exc).items() if not key.startswith("_")
        )
    return fields


class StructuredFormatter(logging.Formatter):
    """Renders a record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _RECORD_KEYS
        )

        operation = _operation.get()
        if operation is not None:
            payload.setdefault("operation", operation)

        if record.exc_info and record.exc_info[1] is not None:
            payload["error"] = _error_fields(record.exc_info[1])
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_jsonable)


def get_logger(name: str) -> logging.Logger:
    """Logger for a kernel module, e.g. ``get_logger("domain.operations")``."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


_configured = False
_lock = threading.Lock()


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: IO[str] | None = None,
) -> None:
    """
    Send kernel records to ``stream`` (stderr by default) as JSON lines.

    Only the first call has an effect until ``reset_logging``. Kernel
    records do not propagate to the root logger once configured.
    """
    global _configured
    with _lock:
        if _configured:
            return
        _configured = True

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(StructuredFormatter())
    kernel_logger = logging.getLogger(_LOGGER_PREFIX)
    kernel_logger.setLevel(level)
    kernel_logger.propagate = False
    kernel_logger.addHandler(handler)


def reset_logging() -> None:
    """Undo ``configure_logging``. FOR TESTING ONLY."""
    global _configured
    with _lock:
        _configured = False
    kernel_logger = logging.getLogger(_LOGGER_PREFIX)
    kernel_logger.handlers.clear()
    kernel_logger.setLevel(logging.WARNING)
    kernel_logger.propagate = True
