"""Structured logging setup."""

import logging
import sys
from typing import Any

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class StructuredFormatter(logging.Formatter):
    """Formatter that appends fields passed as ``extra={"structured": {...}}``."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        structured: dict[str, Any] | None = getattr(record, "structured", None)
        if structured:
            fields = " ".join(f"{key}={value}" for key, value in structured.items())
            message = f"{message} [{fields}]"
        return message


def configure_logging(level: str | int = logging.INFO) -> None:
    """Install a stderr handler with the structured formatter on the root logger.

    Args:
        level: Log level name or number
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(StructuredFormatter(LOG_FORMAT))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level.upper() if isinstance(level, str) else level)
