"""
Structured logging system for the Plex tools.

This module provides a centralized logger with JSON formatted log files,
plain console output and file rotation. Library code logs through
``logging.getLogger(__name__)``; the CLI installs handlers via setup_logging().
"""

import json
import logging
import logging.handlers
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from .constants import LOG_LEVELS

# Attributes present on every LogRecord; anything else was passed as an extra field
_RECORD_ATTRIBUTES = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "getMessage",
    "message",
    "asctime",
    "exc_info",
    "exc_text",
    "stack_info",
}

_REDACTED_FIELDS = {"token", "password", "X-Plex-Token"}


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON documents."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRIBUTES:
                continue
            log_entry[key] = "***" if key in _REDACTED_FIELDS else value

        return json.dumps(log_entry, default=str)


class PlexLogger:
    """Centralized logger for the Plex tools."""

    def __init__(
            self,
            name: str = "plex_utils",
            log_level: str = "INFO",
            log_dir: Optional[Path] = None,
            enable_console: bool = True,
            max_file_size: int = 10 * 1024 * 1024,  # 10MB
            backup_count: int = 5,
    ):
        """
        Initialize the logger.

        Args:
            name: Logger name, also used for the log file name. Library modules
                log under "plex_utils.*" and propagate here.
            log_level: Log level (DEBUG, INFO, WARN, ERROR)
            log_dir: Directory for log files, default is ./.logs
            enable_console: Whether to enable console output
            max_file_size: Maximum log file size in bytes
            backup_count: Number of rotated files to keep
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(LOG_LEVELS[log_level.upper()])
        self.logger.handlers.clear()

        if enable_console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
            self.logger.addHandler(console_handler)

        log_dir = log_dir or Path.cwd() / ".logs"
        log_dir.mkdir(parents=True, exist_ok=True)
        self.log_file = log_dir / f"{name}.log"

        file_handler = logging.handlers.RotatingFileHandler(
            self.log_file,
            maxBytes=max_file_size,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(JSONFormatter())
        self.logger.addHandler(file_handler)

    def debug(self, message: str, **kwargs) -> None:
        """Log a debug message."""
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs) -> None:
        """Log an info message."""
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        """Log a warning message."""
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs) -> None:
        """Log an error message."""
        self._log(logging.ERROR, message, **kwargs)

    def critical(self, message: str, **kwargs) -> None:
        """Log a critical message."""
        self._log(logging.CRITICAL, message, **kwargs)

    def _log(self, level: int, message: str, **kwargs) -> None:
        extra = {key: value for key, value in kwargs.items() if key not in {"exc_info", "stack_info"}}
        self.logger.log(level, message, extra=extra)

    def log_plex_request(
            self,
            method: str,
            url: str,
            success: bool,
            status_code: Optional[int] = None,
            error_message: Optional[str] = None,
    ) -> None:
        """Log a Plex API request with structured data."""
        log_data: Dict[str, Any] = {
            "method": method,
            "url": url,
            "success": success,
        }

        if status_code is not None:
            log_data["status_code"] = status_code

        if error_message:
            log_data["error"] = error_message

        if success:
            self.info(f"Plex request completed: {method} {url}", **log_data)
        else:
            self.error(f"Plex request failed: {method} {url}", **log_data)

    def log_pagination(self, endpoint: str, pages: int, item_count: int) -> None:
        """Log the outcome of a paginated fetch."""
        self.info(
            f"Paginated fetch completed: {endpoint}",
            endpoint=endpoint,
            pages=pages,
            item_count=item_count,
        )


# Global logger instance
_global_logger: Optional[PlexLogger] = None


def setup_logging(
        log_level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_console: bool = True,
) -> PlexLogger:
    """Set up the global logging system."""
    global _global_logger

    if log_dir is None:
        log_dir = Path.cwd() / ".logs"

    _global_logger = PlexLogger(
        log_level=log_level,
        log_dir=log_dir,
        enable_console=enable_console,
    )

    return _global_logger


def get_logger() -> PlexLogger:
    """Get the global logger instance, configuring defaults on first use."""
    global _global_logger
    if _global_logger is None:
        _global_logger = setup_logging()

    return _global_logger
