"""
Logging setup for the process tracker.

Every module logs through ``logging.getLogger(__name__)`` under the
``process_tracker`` namespace. Hosts pick the output format with
``TrackerConfig.log_format``: ``"text"`` leaves handlers to the host,
``"json"`` installs single-line JSON records on stdout for log collectors.
"""

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

from .types import format_timestamp

PACKAGE_LOGGER = "process_tracker"
LOG_FORMATS = ("text", "json")

# Attributes every LogRecord carries; anything else came in through ``extra``
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
}


class StructuredJsonFormatter(logging.Formatter):
    """
    Render records as one JSON object per line.

    Fields:
    - time: record creation time, ISO 8601 UTC with milliseconds and ``Z``
      (the same shape as committed entry times)
    - level, logger, message
    - exception: formatted traceback, when the record carries one
    - any ``extra`` fields; values that are not JSON-serializable are
      rendered with ``str()``
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": format_timestamp(datetime.fromtimestamp(record.created, UTC)),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        for key, value in vars(record).items():
            if key in _RECORD_ATTRS or key.startswith("_"):
                continue
            payload[key] = value

        return json.dumps(payload, default=str, ensure_ascii=False)


def configure_structured_logging(
    level: int | str = logging.INFO,
    logger_name: str = PACKAGE_LOGGER,
) -> logging.Logger:
    """
    Send a logger's records to stdout as JSON.

    Repeated calls replace the handler instead of adding another one.

    Args:
        level: Logging level or level name
        logger_name: Logger to configure (default: the package logger)

    Returns:
        The configured logger
    """
    logger = logging.getLogger(logger_name)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredJsonFormatter())
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger


def configure_logging(level: int | str, log_format: str = "text") -> logging.Logger:
    """Apply the configured level and output format to the package logger."""
    if log_format == "json":
        return configure_structured_logging(level)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    return logger
