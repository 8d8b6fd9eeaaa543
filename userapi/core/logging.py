"""Logging configuration for userapi.

Logging is a cross-cutting concern here: the User entity never logs, the
service and repository log through module loggers, and the request context
middleware adds one summary line per request.  This module only decides
WHERE those records go and HOW they look.

TWO OUTPUT SHAPES
------------------
  _ContainerFormatter — one human-readable line per record, for a terminal
    or `docker logs`.  WARNING and above carry the source location so a
    rejected create or a storage failure can be traced to its guard clause.

  _JsonFormatter — one JSON object per line (JSON Lines), for log shippers.
    Request context (request_id, method, path, status_code, duration_ms)
    becomes top-level keys so it can be filtered on directly:

      {"level": "WARNING", "path": "/users", "status_code": 400, ...}

Set LOG_JSON=true to switch to JSON output.
"""

from __future__ import annotations

import json
import logging
import sys

# Loggers that are chatty at DEBUG and add nothing about our own requests.
_QUIET_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error", "httpcore", "httpx")

_DATE_FMT = "%Y-%m-%dT%H:%M:%S%z"


class _ContainerFormatter(logging.Formatter):
    """Single-line formatter for container stdout.

    - ISO-8601 timestamp with milliseconds, level, logger name, message
    - WARNING+: appends [filename:lineno]
    - exception text when the caller used logger.exception() / exc_info=True
    """

    _BASE_FMT = "%(asctime)s %(levelname)-8s %(name)s  %(message)s"
    _LOC_SUFFIX = "  [%(filename)s:%(lineno)d]"

    def __init__(self) -> None:
        super().__init__(datefmt=_DATE_FMT)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        stamp = super().formatTime(record, datefmt)
        # Splice .mmm in ahead of the trailing +HHMM offset
        return f"{stamp[:-5]}.{int(record.msecs):03d}{stamp[-5:]}"

    def format(self, record: logging.LogRecord) -> str:
        with_location = record.levelno >= logging.WARNING
        self._style._fmt = self._BASE_FMT + (self._LOC_SUFFIX if with_location else "")
        return super().format(record)


class _JsonFormatter(logging.Formatter):
    """JSON Lines formatter.

    Context fields are copied from the LogRecord when present; the request
    context middleware and its logging filter are what put them there.
    """

    _CONTEXT_FIELDS = (
        "request_id",
        "method",
        "path",
        "status_code",
        "duration_ms",
    )

    def __init__(self) -> None:
        super().__init__(datefmt=_DATE_FMT)

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key in self._CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                entry[key] = value

        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def setup_logging(level_name: str, *, json_format: bool = False) -> None:
    """Point the root logger at stdout with the chosen formatter.

    Args:
        level_name: debug/info/warning/error (LOG_LEVEL)
        json_format: emit JSON Lines instead of plain text (LOG_JSON)
    """
    level = getattr(logging, level_name.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_JsonFormatter() if json_format else _ContainerFormatter())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
