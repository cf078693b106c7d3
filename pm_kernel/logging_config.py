"""
Structured JSON logging for the project metrics packages.

Every logger lives under the ``pm_kernel`` namespace, so one handler on
that logger collects records from the kernel, engines, config loader and
dashboard services.  Messages are snake_case event names; data goes in
``extra=``.  Render-scoped fields (project id, active view) are carried by
``LogContext`` and stamped on every record emitted inside a ``bind()``.
"""

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
from contextvars import ContextVar
from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

_LOGGER_PREFIX = "pm_kernel"

# ---------------------------------------------------------------------------
# Context propagation
# ---------------------------------------------------------------------------

_CONTEXT_FIELDS = ("project_id", "view")

_context_vars: dict[str, ContextVar[str | None]] = {
    name: ContextVar(f"pm_log_{name}", default=None) for name in _CONTEXT_FIELDS
}


class LogContext:
    """
    Context fields attached to every record.

    Fields: ``project_id`` and ``view``.
    Unknown field names are ignored.
    """

    @staticmethod
    def get_all() -> dict[str, str]:
        """Non-None context fields, in declaration order."""
        return {
            name: var.get()
            for name, var in _context_vars.items()
            if var.get() is not None
        }

    @staticmethod
    def clear() -> None:
        for var in _context_vars.values():
            var.set(None)

    @staticmethod
    def bind(**fields: str | None) -> "_BoundContext":
        """
        Set fields for the duration of a ``with`` block.

        Usage::

            with LogContext.bind(project_id=project.id, view="risks"):
                ...
        """
        return _BoundContext(fields)


class _BoundContext:

    def __init__(self, fields: dict[str, str | None]):
        self._fields = fields
        self._tokens: list[tuple[ContextVar, Any]] = []

    def __enter__(self) -> type[LogContext]:
        for name, value in self._fields.items():
            var = _context_vars.get(name)
            if var is not None and value is not None:
                self._tokens.append((var, var.set(value)))
        return LogContext

    def __exit__(self, *exc: Any) -> None:
        while self._tokens:
            var, token = self._tokens.pop()
            var.reset(token)


# ---------------------------------------------------------------------------
# JSON formatter
# ---------------------------------------------------------------------------

# Attributes every LogRecord has; anything else on a record came from extra=.
_RESERVED = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}


def _json_default(obj: Any) -> Any:
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (date, datetime)):
        return obj.isoformat()
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, (set, frozenset)):
        return sorted(obj, key=str)
    return str(obj)


def _exception_fields(exc: BaseException) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "exc_type": type(exc).__name__,
        "exc_message": str(exc),
    }
    code = getattr(exc, "code", None)
    if code is not None:
        fields["exc_code"] = code
    # Structured attributes of ProjectKernelError subclasses
    for name, value in vars(exc).items():
        if not name.startswith("_"):
            fields[f"exc_{name}"] = value
    return fields


class StructuredFormatter(logging.Formatter):
    """One JSON object per line: ts, level, logger, message, context, extras."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }

        for key, value in vars(record).items():
            if key not in _RESERVED:
                payload.setdefault(key, value)

        if record.exc_info and record.exc_info[1] is not None:
            payload.update(_exception_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_json_default)


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------

_configured = False
_lock = threading.Lock()


def get_logger(name: str) -> logging.Logger:
    """Logger ``pm_kernel.<name>``."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


def configure_logging(
    *,
    level: int | str = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """
    Attach a JSON handler to the ``pm_kernel`` logger.

    Only the first call has an effect until ``reset_logging()``.  ``level``
    may be a number or a level name such as ``"DEBUG"``.
    """
    global _configured
    with _lock:
        if _configured:
            return
        _configured = True

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger(_LOGGER_PREFIX)
    root.setLevel(level)
    root.propagate = False

    h = handler or logging.StreamHandler(stream or sys.stderr)
    h.setFormatter(StructuredFormatter())
    root.addHandler(h)


def reset_logging() -> None:
    """Remove handlers and allow reconfiguration. FOR TESTING ONLY."""
    global _configured
    with _lock:
        _configured = False
    root = logging.getLogger(_LOGGER_PREFIX)
    root.handlers.clear()
    root.setLevel(logging.WARNING)
    root.propagate = True
