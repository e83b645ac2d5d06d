"""JSON log lines for shortsync.

All ``shortsync.*`` loggers funnel into a single handler on the
``shortsync`` logger, which writes one JSON object per record to stderr.
A failed update looks like::

    {"ts": "2026-07-01T12:00:00.123456+00:00", "level": "WARNING",
     "logger": "shortsync.executor", "message": "Link operation failed",
     "op": "create", "key": "s.io/docs", "error": "Client error 400 ..."}

Modules obtain their logger once at import time::

    log = get_logger("shortsync.executor")
    log.info("link created", extra={"extra_fields": {"key": "s.io/docs"}})
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

ROOT_LOGGER_NAME = "shortsync"


class StructuredFormatter(logging.Formatter):
    """Render a record as ``{"ts", "level", "logger", "message", ...}``.

    The mapping in ``extra={"extra_fields": ...}`` is spread into the top
    level.  Tracebacks land under ``exception`` and ``stack_info``.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        fields: dict[str, Any] | None = getattr(record, "extra_fields", None)
        if fields is not None:
            entry.update(fields)

        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            entry["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(entry, default=str)


# Names that already carry a StructuredFormatter handler.
_configured_loggers: set[str] = set()


def _resolve_level(level: int | str) -> int:
    if isinstance(level, str):
        return logging.getLevelName(level.upper())
    return level


def get_logger(
    name: str = ROOT_LOGGER_NAME,
    *,
    level: int | str = logging.WARNING,
    stream: Any | None = None,
) -> logging.Logger:
    """Return the logger called *name*, attaching the JSON handler once.

    A ``shortsync.<module>`` name gets no handler; the ``shortsync``
    logger is set up instead (with *level* and *stream*, default
    ``sys.stderr``) and the module logger propagates to it.  Any other
    name gets its own handler.  Configured loggers stop propagating, so
    handlers on the Python root logger never see the same record twice.
    """
    if name.startswith(ROOT_LOGGER_NAME + "."):
        get_logger(ROOT_LOGGER_NAME, level=level, stream=stream)
        return logging.getLogger(name)

    logger = logging.getLogger(name)
    if name in _configured_loggers:
        return logger

    logger.setLevel(_resolve_level(level))
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(StructuredFormatter())
    logger.addHandler(handler)
    logger.propagate = False
    _configured_loggers.add(name)
    return logger
