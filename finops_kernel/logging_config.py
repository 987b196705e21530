"""Structured JSON logging for the FinOps kernel."""

__all__ = [
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import sys
import threading
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Iterator

# ---------------------------------------------------------------------------
# Context propagation
# ---------------------------------------------------------------------------

# Fields a command binds for the lines it logs; values are stored as str.
_CONTEXT_FIELDS = (
    "correlation_id",
    "actor_id",
    "operation",
    "transaction_id",
    "approval_id",
)

_CONTEXT_VARS: dict[str, ContextVar[str | None]] = {
    name: ContextVar(f"finops_log_{name}", default=None) for name in _CONTEXT_FIELDS
}


class LogContext:
    """
    Command-scoped log fields, safe across threads and tasks.

    FinancialPlatform binds ``correlation_id``, ``actor_id`` and
    ``operation`` for every command, plus ``transaction_id`` or
    ``approval_id`` when the command targets one.
    """

    @staticmethod
    def _var(name: str) -> ContextVar[str | None]:
        try:
            return _CONTEXT_VARS[name]
        except KeyError:
            raise TypeError(f"Unknown log context field: {name}") from None

    @classmethod
    def set(cls, **fields: object) -> None:
        """Set context fields. None values are ignored."""
        for name, value in fields.items():
            if value is not None:
                cls._var(name).set(str(value))

    @classmethod
    def get_all(cls) -> dict[str, str]:
        """Every field currently set, in declaration order."""
        return {
            name: var.get()
            for name, var in _CONTEXT_VARS.items()
            if var.get() is not None
        }

    @classmethod
    def clear(cls) -> None:
        for var in _CONTEXT_VARS.values():
            var.set(None)

    @classmethod
    @contextmanager
    def bind(cls, **fields: object) -> Iterator[type["LogContext"]]:
        """Set fields for the duration of the block, then restore them."""
        tokens = []
        for name, value in fields.items():
            if value is not None:
                var = cls._var(name)
                tokens.append((var, var.set(str(value))))
        try:
            yield cls
        finally:
            for var, token in reversed(tokens):
                var.reset(token)


# ---------------------------------------------------------------------------
# JSON Formatter
# ---------------------------------------------------------------------------

_STDLIB_KEYS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()
) | {"message", "taskName"}


class _JSONEncoder(json.JSONEncoder):
    """Handle datetime, Decimal and Enum values; anything else logs as str()."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, Decimal):
            return str(obj)
        if isinstance(obj, Enum):
            return obj.value
        return str(obj)


class StructuredFormatter(logging.Formatter):
    """Formats each log record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        # Mandatory envelope
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        payload.update(LogContext.get_all())

        # Structured extra data (skip stdlib internal keys)
        for key, val in vars(record).items():
            if key not in _STDLIB_KEYS and key not in payload:
                payload[key] = val

        if record.exc_info and record.exc_info[1] is not None:
            exc = record.exc_info[1]
            payload["exc_type"] = type(exc).__name__
            payload["exc_message"] = str(exc)
            if hasattr(exc, "code"):
                payload["exc_code"] = exc.code
            # Structured fields from FinOpsKernelError subclasses
            for k, v in vars(exc).items():
                if not k.startswith("_") and k not in ("args", "code"):
                    payload[f"exc_{k}"] = v
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, cls=_JSONEncoder)


# ---------------------------------------------------------------------------
# Logger factory
# ---------------------------------------------------------------------------

_LOGGER_PREFIX = "finops_kernel"


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the finops_kernel namespace."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


# ---------------------------------------------------------------------------
# Initialization
# ---------------------------------------------------------------------------

_configured = False
_lock = threading.Lock()


def configure_logging(
    *,
    level: int | str = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """Configure the finops_kernel logger hierarchy (idempotent)."""
    global _configured
    with _lock:
        if _configured:
            return
        _configured = True

    root_logger = logging.getLogger(_LOGGER_PREFIX)
    root_logger.setLevel(level)
    root_logger.propagate = False

    h = handler if handler is not None else logging.StreamHandler(stream or sys.stderr)
    h.setFormatter(StructuredFormatter())
    root_logger.addHandler(h)


def reset_logging() -> None:
    """Reset logging configuration. FOR TESTING ONLY."""
    global _configured
    with _lock:
        _configured = False
    logger = logging.getLogger(_LOGGER_PREFIX)
    logger.handlers.clear()
    logger.setLevel(logging.WARNING)
    logger.propagate = True
