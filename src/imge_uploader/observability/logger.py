"""Structured JSON logger for the im.ge uploader.

Every record is a single-line JSON object so a host that captures stderr
can forward it to its own log view without extra parsing.

Typical structured output::

    {"ts": "2026-10-18T12:00:00.123456+00:00", "level": "INFO",
     "logger": "imge_uploader.uploader", "message": "upload",
     "file_name": "cat.png", "extension": "png", "size_bytes": 20480}

Usage::

    from imge_uploader.observability import get_logger

    log = get_logger("imge_uploader.uploader")
    log.info("upload", extra={"extra_fields": {"file_name": "cat.png"}})
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any


class StructuredFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    Guaranteed keys are ``ts``, ``level``, ``logger`` and ``message``.
    Fields passed via ``extra={"extra_fields": {...}}`` are merged into the
    top-level object, and ``exception`` holds the traceback when the record
    carries one.  Non-ASCII text (the plugin's Chinese messages) is written
    as-is.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **getattr(record, "extra_fields", {}),
        }
        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str, ensure_ascii=False)


# Names that already carry a StructuredFormatter handler.
_configured_loggers: set[str] = set()


def get_logger(
    name: str = "imge_uploader",
    *,
    level: int = logging.DEBUG,
    stream: Any | None = None,
) -> logging.Logger:
    """Get or create a structured JSON logger.

    The first call for *name* attaches a handler writing to *stream*
    (``sys.stderr`` by default) and stops propagation; later calls return
    the same logger unchanged.
    """
    logger = logging.getLogger(name)
    if name in _configured_loggers:
        return logger

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(StructuredFormatter())
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    _configured_loggers.add(name)
    return logger
