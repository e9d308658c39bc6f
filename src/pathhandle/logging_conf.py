"""Logging helpers for pathhandle."""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict

_DEFAULT_LEVEL = "INFO"

_RESERVED_ATTRS = {
    "name",
    "args",
    "msg",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "exc_info",
    "exc_text",
    "stack_info",
}


# Extras attached by pathhandle operations, emitted in this order.
FILE_EVENT_FIELDS = ("path", "destination", "size", "bytes_written", "recursive")


class JsonFormatter(logging.Formatter):
    """JSON-line formatter putting file event fields ahead of other extras.

    A record from ``PathHandle.rename_file`` renders as::

        {"event": "renamed file", "path": "...", "destination": "...",
         "level": "DEBUG", "logger": "pathhandle.handle", "timestamp": "..."}
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {"event": record.getMessage()}
        for field in FILE_EVENT_FIELDS:
            if field in record.__dict__:
                payload[field] = record.__dict__[field]
        payload["level"] = record.levelname
        payload["logger"] = record.name
        payload["timestamp"] = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        extras = {
            name: value
            for name, value in record.__dict__.items()
            if name not in payload and not name.startswith("_") and name not in _RESERVED_ATTRS
        }
        if extras:
            payload["extra"] = extras
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(level_name: str | None = None) -> None:
    """Configure process-wide logging for structured output."""

    level_text = (
        level_name
        or os.getenv("PATHHANDLE_LOG_LEVEL")
        or os.getenv("LOG_LEVEL")
        or _DEFAULT_LEVEL
    ).upper()
    level = logging.getLevelName(level_text)
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers[:] = []

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)

    logging.getLogger("pathhandle").setLevel(level)
