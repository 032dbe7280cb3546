"""
Logging setup for Daybook.

Console logs are colored by level; DAYBOOK_JSON_LOGS switches to one JSON
object per line. The level comes from DAYBOOK_LOG_LEVEL, falling back to
DEBUG when DAYBOOK_DEBUG is set.
"""

import json
import logging
import sys
from typing import Optional

from app.config import get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_RESET = "\x1b[0m"
_LEVEL_COLORS = {
    logging.DEBUG: "\x1b[38;20m",
    logging.INFO: "\x1b[32;20m",
    logging.WARNING: "\x1b[33;20m",
    logging.ERROR: "\x1b[31;20m",
    logging.CRITICAL: "\x1b[31;1m",
}


class ColoredFormatter(logging.Formatter):
    """Wraps each line in the color of its level."""

    def __init__(self):
        super().__init__(LOG_FORMAT, datefmt=DATE_FORMAT)

    def format(self, record):
        line = super().format(record)
        color = _LEVEL_COLORS.get(record.levelno)
        return f"{color}{line}{_RESET}" if color else line


class JsonFormatter(logging.Formatter):
    def format(self, record):
        log_record = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_record)


def setup_logging(level: Optional[str] = None, json_format: Optional[bool] = None) -> None:
    """
    Install a single stdout handler on the root logger.

    Args:
        level: Overrides the configured level (DEBUG, INFO, ...)
        json_format: Overrides DAYBOOK_JSON_LOGS
    """
    settings = get_settings()
    log_level = level or settings.log_level or ("DEBUG" if settings.debug else "INFO")
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    if json_format is None:
        json_format = settings.json_logs

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter() if json_format else ColoredFormatter())

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(numeric_level)

    # The HTTP gateway and the ASGI server log every request
    for name in ("httpcore", "httpx", "uvicorn.access"):
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Logger namespaced under 'daybook' (pass __name__)."""
    if not name.startswith("daybook"):
        name = f"daybook.{name}"
    return logging.getLogger(name)
