"""
Common utilities package for Plex Tools.

This package contains the configuration, logging and file helpers shared by
the Plex client and the command line tools.
"""

from .constants import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_PAGE_SIZE,
    DEFAULT_TIMEOUT,
    FORMAT_JSON,
    FORMAT_RAW,
    FORMAT_XML,
    LOG_DIR,
    LOG_LEVELS,
    PLEX_PASSWORD,
    PLEX_TOKEN,
    PLEX_URL,
    PLEX_USERNAME,
)
from .file_manager import (
    FileOperationError,
    ensure_directory_exists,
    write_json_export,
)
from .logger import PlexLogger, get_logger, setup_logging

__all__ = [
    # Constants
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_PAGE_SIZE",
    "DEFAULT_TIMEOUT",
    "FORMAT_JSON",
    "FORMAT_RAW",
    "FORMAT_XML",
    "LOG_DIR",
    "LOG_LEVELS",
    "PLEX_PASSWORD",
    "PLEX_TOKEN",
    "PLEX_URL",
    "PLEX_USERNAME",
    # File manager
    "FileOperationError",
    "ensure_directory_exists",
    "write_json_export",
    # Logger
    "PlexLogger",
    "get_logger",
    "setup_logging",
]
