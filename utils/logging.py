"""
Logging Configuration Module

Provides structured logging with consistent formatting across the application.

Usage:
    from utils.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Word discovered", extra={"word_id": word_id})
    logger.error("Failed to persist vote", exc_info=True)
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

from config.settings import settings


# =============================================================================
# Custom Formatters
# =============================================================================

class ColoredFormatter(logging.Formatter):
    """
    Colored log formatter for console output.

    Colors:
        - DEBUG: Cyan
        - INFO: Green
        - WARNING: Yellow
        - ERROR: Red
        - CRITICAL: Bold Red
    """

    COLORS = {
        logging.DEBUG: "\033[36m",      # Cyan
        logging.INFO: "\033[32m",       # Green
        logging.WARNING: "\033[33m",    # Yellow
        logging.ERROR: "\033[31m",      # Red
        logging.CRITICAL: "\033[1;31m", # Bold Red
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors."""
        color = self.COLORS.get(record.levelno, "")
        record.levelname = f"{color}{record.levelname:8}{self.RESET}"
        return super().format(record)


class JSONFormatter(logging.Formatter):
    """
    JSON log formatter for production/structured logging.

    Outputs logs as JSON objects for easy parsing by log aggregators.
    Fields passed through ``extra=`` are copied into the payload.
    """

    # Attributes every LogRecord carries; anything else came from extra=
    _RESERVED = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
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

        extra = {
            key: value for key, value in vars(record).items()
            if key not in self._RESERVED
        }
        if extra:
            log_data["extra"] = extra

        return json.dumps(log_data, default=str)


# =============================================================================
# Logger Configuration
# =============================================================================

def setup_logging(
    level: Optional[str] = None,
    json_format: Optional[bool] = None
) -> None:
    """
    Configure application-wide logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Defaults to DEBUG if settings.DEBUG else INFO.
        json_format: Use JSON formatter for structured logging.
                     Defaults to settings.LOG_JSON.
    """
    if level is None:
        level = "DEBUG" if settings.DEBUG else "INFO"
    if json_format is None:
        json_format = settings.LOG_JSON

    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)

    if json_format:
        formatter = JSONFormatter()
    else:
        formatter = ColoredFormatter(
            fmt="%(asctime)s │ %(levelname)s │ %(name)s │ %(message)s",
            datefmt="%H:%M:%S"
        )

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("google_genai").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.DATABASE_ECHO else logging.WARNING
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: Logger name, typically __name__ of the calling module.

    Returns:
        logging.Logger: Configured logger instance.
    """
    return logging.getLogger(name)


# =============================================================================
# Convenience Functions
# =============================================================================

def log_api_call(
    service: str,
    endpoint: str,
    success: bool,
    duration_ms: Optional[float] = None,
    error: Optional[str] = None
) -> None:
    """
    Log an external API call with standard format.

    Args:
        service: Name of the service (e.g., "Gemini")
        endpoint: API endpoint or operation called
        success: Whether the call succeeded
        duration_ms: Call duration in milliseconds
        error: Error message if failed
    """
    logger = get_logger("api")

    status = "✅" if success else "❌"
    msg = f"{status} {service} | {endpoint}"

    if duration_ms is not None:
        msg += f" | {duration_ms:.0f}ms"

    if success:
        logger.info(msg)
    else:
        logger.error(f"{msg} | Error: {error}")


def log_word_action(
    action: str,
    word_id: str,
    success: bool,
    details: Optional[str] = None
) -> None:
    """
    Log a dictionary action (discover, vote, award, regenerate) with standard format.

    Args:
        action: Action performed
        word_id: Canonical key of the word
        success: Whether the action succeeded
        details: Additional details
    """
    logger = get_logger("dictionary")

    status = "✅" if success else "❌"
    msg = f"{status} {action.upper()} | {word_id}"

    if details:
        msg += f" | {details}"

    if success:
        logger.info(msg)
    else:
        logger.warning(msg)
