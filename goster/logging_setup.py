"""JSON logging configuration."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import IO

LOGGER_NAME = "goster"

_LEVELS = {
    "panic": logging.CRITICAL,
    "fatal": logging.CRITICAL,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": logging.DEBUG,
}
_LEVEL_NAMES = {logging.CRITICAL: "fatal", logging.WARNING: "warning"}


class JsonFormatter(logging.Formatter):
    """Render each record as one JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": datetime.fromtimestamp(record.created, timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": _LEVEL_NAMES.get(record.levelno, record.levelname.lower()),
            "message": record.getMessage(),
        }
        if hasattr(record, "function"):
            entry["function"] = record.function
        return json.dumps(entry, sort_keys=True, default=str)


def configure_logging(level: str = "info", stream: IO[str] | None = None) -> int:
    """Send JSON logs to stream (stdout by default); unknown levels mean info."""
    resolved = _LEVELS.get((level or "").strip().lower(), logging.INFO)
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(JsonFormatter())
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers = [handler]
    logger.setLevel(resolved)
    logger.propagate = False
    return resolved


def get_logger(function: str) -> logging.LoggerAdapter:
    """Return a logger whose records carry the given function name."""
    return logging.LoggerAdapter(logging.getLogger(LOGGER_NAME), {"function": function})