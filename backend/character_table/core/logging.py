"""Logging utilities for Character Table.

Records are emitted as one JSON object per line. Structured values are
passed through ``extra`` with a ``ctx_`` prefix (``extra={"ctx_url": url}``)
and end up, prefix stripped, under the ``context`` key.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import orjson

_DEFAULT_LEVEL = os.environ.get("CHTB_LOG_LEVEL", "INFO")
_DEFAULT_FORMAT = os.environ.get("CHTB_LOG_FORMAT", "json")
CONTEXT_PREFIX = "ctx_"


def record_context(record: logging.LogRecord) -> dict[str, Any]:
    """Collect ``ctx_*`` extras from a record, keyed without the prefix."""
    return {
        key[len(CONTEXT_PREFIX) :]: value
        for key, value in record.__dict__.items()
        if key.startswith(CONTEXT_PREFIX)
    }


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context = record_context(record)
        if context:
            payload["context"] = context
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return orjson.dumps(payload, default=str).decode("utf-8")


class TextFormatter(logging.Formatter):
    """Human-readable lines with context appended as ``key=value`` pairs."""

    def __init__(self) -> None:
        super().__init__("%(asctime)s %(levelname)s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = record_context(record)
        if not context:
            return line
        pairs = " ".join(f"{key}={value}" for key, value in context.items())
        return f"{line} [{pairs}]"


def configure_logging(level: str | int = _DEFAULT_LEVEL, fmt: str = _DEFAULT_FORMAT) -> None:
    """Send all records to stdout in ``json`` or ``text`` format."""
    logging.captureWarnings(True)
    root = logging.getLogger()
    root.setLevel(level)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(TextFormatter() if fmt == "text" else JsonFormatter())
    root.handlers = [handler]


def get_logger(name: str = "character_table") -> logging.Logger:
    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)


__all__ = ["JsonFormatter", "TextFormatter", "configure_logging", "get_logger", "record_context"]
