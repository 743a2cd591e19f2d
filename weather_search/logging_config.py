"""Logging setup for Weather Search.

The root logger writes JSON records (python-json-logger) to
logs/weather_search.log, rotated at 10MB with 5 backups, and plain lines to
stdout. Modules log structured events through log_with_context; every event
carries an `event_type` field so the JSON file can be filtered per event.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import httpx
from pythonjsonlogger import jsonlogger

LOG_FILE_NAME = "weather_search.log"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Chatty libraries: their own request logs duplicate our event hooks
QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access")

# Query parameters whose values never reach a log line
SENSITIVE_PARAMS = ("appid", "api_key", "token", "key")
REDACTED = "***REDACTED***"


def setup_logging(log_level: str = "INFO", log_dir: Path | None = None) -> logging.Logger:
    """Install the JSON file handler and the console handler on the root logger.

    Args:
        log_level: Console and root level name; unknown names fall back to INFO
        log_dir: Directory for the JSON log file (defaults to <project>/logs)

    Returns:
        The root logger
    """
    level_name = log_level.strip().upper()
    level = getattr(logging, level_name) if level_name in LOG_LEVELS else logging.INFO

    log_dir = log_dir or Path(__file__).resolve().parent.parent / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    file_handler = RotatingFileHandler(
        log_dir / LOG_FILE_NAME,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setFormatter(
        jsonlogger.JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s %(module)s %(lineno)d",
            rename_fields={"levelname": "level", "name": "logger"},
            timestamp=True,
        )
    )
    file_handler.setLevel(logging.DEBUG)
    root.addHandler(file_handler)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s", "%H:%M:%S"))
    console.setLevel(level)
    root.addHandler(console)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_with_context(logger: logging.Logger, level: str, message: str, **fields: Any) -> None:
    """Log `message` with `fields` attached as structured extras.

    Fields that are None are left out of the record.
    """
    extra = {key: value for key, value in fields.items() if value is not None}
    getattr(logger, level.lower())(message, extra=extra)


def redact_url(url: str | httpx.URL) -> str:
    """Return the URL with the values of sensitive query parameters masked."""
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL:
        return "<invalid url>"
    for param in SENSITIVE_PARAMS:
        if param in parsed.params:
            parsed = parsed.copy_set_param(param, REDACTED)
    return str(parsed)
