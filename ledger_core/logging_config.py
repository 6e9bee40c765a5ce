"""
Logging configuration.

Two output styles:
- console: human-readable lines for local development
- json: one JSON object per line for log aggregation

Both are selected through Settings (LOG_FORMAT, LOG_LEVEL).
"""

import json
import logging
import logging.config
from datetime import datetime, timezone

from ledger_core.config import Settings


# Attributes every LogRecord carries; anything else was passed via extra=
_STANDARD_ATTRS = {
    "name", "msg", "args", "levelname", "levelno", "pathname",
    "filename", "module", "lineno", "funcName", "created",
    "msecs", "relativeCreated", "thread", "threadName",
    "processName", "process", "exc_info", "exc_text", "stack_info",
    "message", "taskName",
}


class JsonFormatter(logging.Formatter):
    """
    JSON log formatter.

    Outputs JSON lines with timestamp, level, logger, message,
    source location, exception text and any extra fields.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            },
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        extras = {}
        for key, value in record.__dict__.items():
            if key in _STANDARD_ATTRS:
                continue
            try:
                json.dumps(value)
                extras[key] = value
            except (TypeError, ValueError):
                extras[key] = str(value)

        if extras:
            log_entry["extra"] = extras

        return json.dumps(log_entry, default=str)


def get_logging_config(level: str = "INFO", fmt: str = "console") -> dict:
    """
    Build a dictConfig mapping.

    Args:
        level: root level for application loggers
        fmt: "json" or "console"
    """
    if fmt == "json":
        formatters = {
            "json": {"()": "ledger_core.logging_config.JsonFormatter"},
        }
        formatter_name = "json"
    else:
        formatters = {
            "verbose": {
                "format": "[{asctime}] {levelname} {name} {message}",
                "style": "{",
            },
        }
        formatter_name = "verbose"

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": formatter_name,
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "ledger_core": {
                "handlers": ["console"],
                "level": level,
                "propagate": False,
            },
            "sqlalchemy.engine": {
                "handlers": ["console"],
                "level": "WARNING",
                "propagate": False,
            },
        },
    }


def configure_logging(settings: Settings) -> None:
    """Apply the logging configuration for the given settings."""
    logging.config.dictConfig(
        get_logging_config(settings.LOG_LEVEL.upper(), settings.LOG_FORMAT)
    )
