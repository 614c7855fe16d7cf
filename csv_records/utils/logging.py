"""
Logging setup for the CSV records service.

The API, the CLI, and the ingestion pipeline all log through the standard
library. Output is a one-line console format by default; with ``LOG_JSON=1``
each record becomes a JSON object whose keys include every field passed via
``extra=`` (post ids, upload paths, row counts).

Usage:
    from csv_records.utils.logging import configure_from_settings, get_logger

    configure_from_settings(get_settings())
    log = get_logger(__name__)
    log.info("[INGEST SUCCESS]", extra={"rows": 1000})
"""

from __future__ import annotations

import json
import logging
import logging.config
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from csv_records.config import Settings

# Attributes every LogRecord carries; anything else came in through `extra=`.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime", "extra"}

# Third-party loggers that are chatty at DEBUG (multipart logs every form part).
QUIET_LOGGERS: Dict[str, str] = {
    "multipart": "WARNING",
    "python_multipart": "WARNING",
    "httpx": "WARNING",
}

CONSOLE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _json_formatter(record: logging.LogRecord) -> str:
    """Serialize a record, promoting its ``extra=`` fields to top-level keys."""
    payload: Dict[str, Any] = {
        "level": record.levelname,
        "logger": record.name,
        "message": record.getMessage(),
    }
    payload.update(
        (key, value)
        for key, value in vars(record).items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    )
    if record.exc_info:
        payload["exc_info"] = logging.Formatter().formatException(record.exc_info)
    if record.stack_info:
        payload["stack_info"] = record.stack_info
    # Older call sites pass a nested dict as extra={"extra": {...}}.
    nested = getattr(record, "extra", None)
    if isinstance(nested, dict):
        payload.update(nested)
    return json.dumps(payload, default=str)


class JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        return _json_formatter(record)


def build_logging_config(level: str = "INFO", json_logs: bool = False) -> Dict[str, Any]:
    """
    Return the ``dictConfig`` mapping used by :func:`configure_logging`.

    The root logger gets a single stderr handler; loggers listed in
    ``QUIET_LOGGERS`` are capped so DEBUG runs stay readable.
    """
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {"format": CONSOLE_FORMAT, "datefmt": "%Y-%m-%d %H:%M:%S"},
            "json": {"()": JsonFormatter},
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "json" if json_logs else "console",
                "level": level,
            }
        },
        "loggers": {name: {"level": quiet} for name, quiet in QUIET_LOGGERS.items()},
        "root": {"handlers": ["default"], "level": level},
    }


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """
    Configure root logging.

    Parameters
    ----------
    level : str
        Logging level name (e.g., "DEBUG", "INFO", "WARNING").
    json_logs : bool
        Emit JSON lines instead of the console format.
    """
    logging.config.dictConfig(build_logging_config(level=level.upper(), json_logs=json_logs))


def configure_from_settings(settings: "Settings") -> None:
    """Apply ``LOG_LEVEL`` and ``LOG_JSON`` from the service settings."""
    configure_logging(level=settings.log_level, json_logs=settings.log_json)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name)


__all__ = [
    "JsonFormatter",
    "build_logging_config",
    "configure_from_settings",
    "configure_logging",
    "get_logger",
]
