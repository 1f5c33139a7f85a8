"""
Logging setup for the relay and the dashboard pipeline.

Every line carries the id of the HTTP request that produced it (when
there is one), so the six parallel upstream fetches behind a single
dashboard query can be read back together.

Usage:
    from tickerboard.core.logging import get_logger

    logger = get_logger("services.relay")
    logger.info("Fetched", extra={"host": "statusinvest.com.br"})
"""

from __future__ import annotations

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .config import Settings, settings


# Set by the request-id middleware for the duration of one request
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

# Attributes every LogRecord carries; anything else came in through `extra=`
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime"}

# Third-party loggers that would repeat what the relay already logs
_NOISY_LOGGERS = ("uvicorn.access", "httpx", "httpcore")


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    }


def _timestamp() -> datetime:
    return datetime.now(timezone.utc)


class StructuredFormatter(logging.Formatter):
    """One JSON object per line, `extra=` fields merged in at top level."""

    def __init__(self, include_location: bool = False):
        super().__init__()
        self.include_location = include_location

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": _timestamp().isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if rid := request_id_var.get():
            entry["request_id"] = rid
        entry.update(_extra_fields(record))

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        if self.include_location:
            entry["location"] = f"{record.filename}:{record.lineno} ({record.funcName})"

        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Single-line output for a terminal."""

    def format(self, record: logging.LogRecord) -> str:
        rid = request_id_var.get()
        prefix = f"[{rid[:8]}] " if rid else ""
        line = (
            f"{_timestamp():%Y-%m-%d %H:%M:%S} {record.levelname:<8} "
            f"{prefix}{record.name}: {record.getMessage()}"
        )
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def setup_logging(config: Settings | None = None) -> None:
    """Route all logging to stdout in the configured format and level."""
    config = config or settings
    level = logging.getLevelName(config.log_level)

    if config.log_format == "json":
        formatter: logging.Formatter = StructuredFormatter(include_location=config.debug)
    else:
        formatter = TextFormatter()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Logger under the `tickerboard.` namespace."""
    return logging.getLogger(f"tickerboard.{name}")
