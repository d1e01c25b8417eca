"""
Structured JSON logging for the production lifecycle packages.

Every record under the ``production_kernel`` logger namespace is rendered
as one JSON object per line:

    {"ts": ..., "level": "INFO", "logger": "production_kernel.services.lifecycle",
     "message": "project_status_pinned", "project_id": "42", "actor_id": "jdoe",
     "phase": "IN QC"}

Context fields (``project_id``, ``actor_id``) are bound for the duration of
a service call with ``LogContext.bind`` and merged into every record emitted
inside the block.  Kernel errors contribute their ``code`` and ``details()``.
"""

__all__ = [
    "CONTEXT_FIELDS",
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, date, datetime
from enum import Enum
from typing import Any

from production_kernel.exceptions import ProductionKernelError

_LOGGER_PREFIX = "production_kernel"
_HANDLER_NAME = "production_kernel.structured"

CONTEXT_FIELDS = ("project_id", "actor_id")

_context_vars: dict[str, ContextVar[str | None]] = {
    name: ContextVar(f"log_{name}", default=None) for name in CONTEXT_FIELDS
}


def _context_var(name: str) -> ContextVar[str | None]:
    try:
        return _context_vars[name]
    except KeyError:
        raise ValueError(
            f"Unknown log context field '{name}'; expected one of {CONTEXT_FIELDS}"
        ) from None


class LogContext:
    """Call-scoped log fields, safe across threads and asyncio tasks."""

    @staticmethod
    def set(**fields: str | None) -> None:
        """Set context fields.  None values leave the field untouched."""
        for name, value in fields.items():
            var = _context_var(name)
            if value is not None:
                var.set(value)

    @staticmethod
    def get_all() -> dict[str, str]:
        return {
            name: value
            for name, var in _context_vars.items()
            if (value := var.get()) is not None
        }

    @staticmethod
    def clear() -> None:
        for var in _context_vars.values():
            var.set(None)

    @staticmethod
    @contextmanager
    def bind(**fields: str | None) -> Iterator[None]:
        """Set fields for the duration of the block, then restore them."""
        tokens = []
        for name, value in fields.items():
            var = _context_var(name)
            if value is not None:
                tokens.append((var, var.set(value)))
        try:
            yield
        finally:
            for var, token in reversed(tokens):
                var.reset(token)


# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRIBUTES: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "taskName"}


def _json_default(obj: Any) -> Any:
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    return str(obj)


def _exception_fields(exc: BaseException) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "exc_type": type(exc).__name__,
        "exc_message": str(exc),
    }
    if isinstance(exc, ProductionKernelError):
        fields["exc_code"] = exc.code
        for key, value in exc.details().items():
            fields[f"exc_{key}"] = value
    return fields


class StructuredFormatter(logging.Formatter):
    """Formats each log record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }

        for key, value in vars(record).items():
            if key not in _RECORD_ATTRIBUTES:
                payload.setdefault(key, value)

        if record.exc_info and record.exc_info[1] is not None:
            payload.update(_exception_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_json_default)


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the production_kernel namespace."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """
    Install the structured handler on the production_kernel logger.

    Idempotent: once the handler is installed, later calls change nothing
    until ``reset_logging`` removes it.
    """
    root = logging.getLogger(_LOGGER_PREFIX)
    if any(h.get_name() == _HANDLER_NAME for h in root.handlers):
        return

    installed = handler if handler is not None else logging.StreamHandler(stream or sys.stderr)
    installed.set_name(_HANDLER_NAME)
    installed.setFormatter(StructuredFormatter())

    root.setLevel(level)
    root.propagate = False
    root.addHandler(installed)


def reset_logging() -> None:
    """Remove all handlers and restore defaults.  FOR TESTING ONLY."""
    root = logging.getLogger(_LOGGER_PREFIX)
    root.handlers.clear()
    root.setLevel(logging.WARNING)
    root.propagate = True
