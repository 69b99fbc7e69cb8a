"""Logging configuration for the survey resume service.

Production logs are emitted as JSON objects; development logs are coloured
single lines. Resume tokens passed as ``extra={"token": ...}`` are truncated
before they reach any handler.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from app.config import Settings, get_settings

# Attributes every LogRecord carries; anything else came in through ``extra``.
_STANDARD_RECORD_FIELDS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__.keys()
) | {"message", "asctime"}

# Context fields rendered inline by the development formatter.
_CONTEXT_FIELDS = ("request_id", "operation", "storage", "token", "response_id")


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _STANDARD_RECORD_FIELDS:
                log_data[key] = value

        return json.dumps(log_data, default=str)


class DevelopmentFormatter(logging.Formatter):
    """Human-readable formatter for development."""

    # ANSI color codes
    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
        "RESET": "\033[0m",  # Reset
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors and any context fields.

        Args:
            record: Log record to format

        Returns:
            Colored, formatted log string
        """
        color = self.COLORS.get(record.levelname, self.COLORS["RESET"])
        reset = self.COLORS["RESET"]

        formatted = (
            f"{color}[{record.levelname:8}]{reset} "
            f"{record.name:30} - {record.getMessage()}"
        )

        context = [
            f"{field}={getattr(record, field)}"
            for field in _CONTEXT_FIELDS
            if getattr(record, field, None) is not None
        ]
        if context:
            formatted += f" [{' '.join(context)}]"

        if record.exc_info:
            formatted += "\n" + self.formatException(record.exc_info)

        return formatted


class TokenRedactionFilter(logging.Filter):
    """Truncate resume tokens attached to log records.

    A full token is a bearer credential for a respondent's answers, so only
    its first characters are ever written out.
    """

    def __init__(self, visible_chars: int = 12):
        super().__init__()
        self.visible_chars = visible_chars

    def filter(self, record: logging.LogRecord) -> bool:
        token = getattr(record, "token", None)
        if isinstance(token, str) and len(token) > self.visible_chars:
            record.token = f"{token[:self.visible_chars]}..."
        return True


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Configure application logging based on environment.

    In production, uses JSON formatting for structured logs.
    In development, uses colored human-readable formatting.

    Args:
        settings: Settings to configure from (defaults to cached settings)
    """
    settings = settings or get_settings()

    root_logger = logging.getLogger()
    root_logger.setLevel(settings.log_level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(settings.log_level)
    console_handler.addFilter(TokenRedactionFilter())

    if settings.is_production:
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = DevelopmentFormatter()

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Set log levels for third-party libraries
    logging.getLogger("uvicorn").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info(
        f"Logging configured - Environment: {settings.environment}, "
        f"Level: {settings.log_level}"
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)
