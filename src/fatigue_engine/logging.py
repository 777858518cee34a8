"""Structured logging for the fatigue engine.

FATIGUE_LOG_FORMAT selects "json" (default) or "text"; FATIGUE_LOG_LEVEL takes
a standard level name. Extras passed as ``fatigue_<name>=...`` are emitted in
the JSON object's "context" mapping under ``<name>``.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

EXTRA_PREFIX = "fatigue_"
LOG_FORMATS = ("json", "text")
TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def parse_level(value: str | int | None, default: int = logging.INFO) -> int | None:
    """Map a level name or number to a logging level; None when unrecognized."""
    if isinstance(value, int):
        return value
    if not value:
        return default
    return logging.getLevelNamesMapping().get(value.strip().upper())


def fatigue_context(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key[len(EXTRA_PREFIX):]: value
        for key, value in record.__dict__.items()
        if key.startswith(EXTRA_PREFIX)
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per record: timestamp, level, logger, message, context."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context = fatigue_context(record)
        if context:
            entry["context"] = context
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(log_format: str = "json", level: str | int | None = logging.INFO) -> int:
    """Route all records to stderr and return the level actually applied.

    Unknown formats fall back to text and unknown levels to INFO; both are
    reported once through the configured handler instead of aborting startup.
    """
    resolved = parse_level(level)
    effective = logging.INFO if resolved is None else resolved

    handler = logging.StreamHandler(sys.stderr)
    if log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(effective)

    logger = logging.getLogger(__name__)
    if resolved is None:
        logger.warning("Unknown log level %r, using INFO", level)
    if log_format not in LOG_FORMATS:
        logger.warning("Unknown log format %r, using text", log_format)
    return effective
