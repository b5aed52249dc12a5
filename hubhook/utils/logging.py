"""Structured JSON logging for hubhook."""

import json
import logging
import os
import traceback
from datetime import UTC, datetime
from typing import Any, ClassVar

REDACTED = "[redacted]"


class JsonFormatter(logging.Formatter):
    """Format log records as JSON for structured logging.

    Extra fields that look like credentials are replaced with a placeholder,
    so a stray ``extra={"secret": ...}`` never reaches the log stream.
    """

    # Fields that are part of the standard LogRecord but not useful in JSON output
    RESERVED_ATTRS: ClassVar[set[str]] = {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "taskName",
        "message",
    }

    SENSITIVE_MARKERS: ClassVar[tuple[str, ...]] = (
        "secret",
        "signature",
        "digest",
        "token",
        "password",
    )

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON.

        Args:
            record: The log record to format.

        Returns:
            JSON-formatted string.
        """
        log_entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.levelno >= logging.WARNING:
            log_entry["location"] = {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info:
            log_entry["exception"] = "".join(traceback.format_exception(*record.exc_info))

        for key, value in record.__dict__.items():
            if key in self.RESERVED_ATTRS or key.startswith("_"):
                continue
            if self._is_sensitive(key):
                log_entry[key] = REDACTED
                continue
            try:
                json.dumps(value)
                log_entry[key] = value
            except (TypeError, ValueError):
                log_entry[key] = str(value)

        return json.dumps(log_entry, default=str)

    def _is_sensitive(self, key: str) -> bool:
        lowered = key.lower()
        return any(marker in lowered for marker in self.SENSITIVE_MARKERS)


def configure_logging(name: str = "hubhook") -> logging.Logger:
    """Configure structured JSON logging for the application.

    Args:
        name: The root logger name.

    Returns:
        Configured logger instance.
    """
    log_level_str = os.environ.get("LOG_LEVEL", "INFO").upper()
    log_level = getattr(logging, log_level_str, None)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setLevel(log_level)
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)

    logger.propagate = False

    return logger


def get_logger(module_name: str) -> logging.Logger:
    """Get a child logger for a specific module.

    Args:
        module_name: The module name to create a child logger for.

    Returns:
        Child logger instance.
    """
    return logging.getLogger(f"hubhook.{module_name}")
