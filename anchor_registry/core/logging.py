"""Logging configuration for anchor-registry.

Two output formats, picked by LOG_JSON:

  _ContainerFormatter: human-readable, single line, for local dev.
    WARNING and above get a [file:line] suffix, which is where the
    registry logs its rejected operations, so the guard that fired is
    one click away.

  _JsonFormatter: JSON Lines for log aggregation in production.
    Request context fields injected by RequestContextMiddleware
    (request_id, method, path, caller, ...) become top-level keys and
    can be filtered on directly.

Registry services log through module loggers (``anchor_registry.services.*``):
successful mutations at INFO, rejections at WARNING.  The notification
log is the authoritative audit trail; logs are for operators.
"""

from __future__ import annotations

import json
import logging
import sys
from contextvars import ContextVar

# Current request ID.  Set by RequestContextMiddleware; "-" outside a request.
request_id_var: ContextVar[str] = ContextVar("request_id", default="-")


class _RequestContextFilter(logging.Filter):
    """Copy the current request_id onto every LogRecord.

    Attached to the handler, not the root logger: logger-level filters do
    not run for records propagated up from child loggers.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            record.request_id = request_id_var.get("-")  # type: ignore[attr-defined]
        return True


class _ContainerFormatter(logging.Formatter):
    """Single-line formatter tuned for container stdout.

    - Always: ISO-8601 timestamp, level, logger name, message
    - WARNING+: appends [filename:lineno]
    - Stack trace included when exc_info is present
    """

    _BASE_FMT = "%(asctime)s %(levelname)-8s %(name)s  %(message)s"
    _LOC_SUFFIX = "  [%(filename)s:%(lineno)d]"

    def __init__(self) -> None:
        super().__init__(datefmt="%Y-%m-%dT%H:%M:%S%z")

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        base = super().formatTime(record, datefmt)
        ms = int(record.msecs)
        # Insert .NNN before the timezone offset (last 5 chars: +0000)
        return f"{base[:-5]}.{ms:03d}{base[-5:]}"

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno >= logging.WARNING:
            self._style._fmt = self._BASE_FMT + self._LOC_SUFFIX
        else:
            self._style._fmt = self._BASE_FMT
        return super().format(record)


class _JsonFormatter(logging.Formatter):
    """One JSON object per line.

    Context fields attached to the LogRecord by the request middleware
    are promoted to top-level keys when present.
    """

    _CONTEXT_FIELDS = (
        "request_id",
        "method",
        "path",
        "caller",
        "status_code",
        "duration_ms",
        "error_code",
    )

    def __init__(self) -> None:
        super().__init__(datefmt="%Y-%m-%dT%H:%M:%S%z")

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, object] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key in self._CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                log_entry[key] = value

        if record.exc_info and record.exc_info[0] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def setup_logging(level_name: str, *, json_format: bool = False) -> None:
    """Configure the root logger for container environments.

    Args:
        level_name: Log level string (debug/info/warning/error); unknown
                    values fall back to INFO.
        json_format: Emit JSON lines instead of the human-readable format.
    """
    level = getattr(logging, level_name.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_JsonFormatter() if json_format else _ContainerFormatter())
    handler.addFilter(_RequestContextFilter())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    for name in ("uvicorn", "uvicorn.access", "uvicorn.error", "httpcore", "httpx"):
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
