"""
File manager for writing Plex query results to disk.

This module provides the directory and export helpers used by the CLI when
results are saved instead of printed.
"""

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class FileOperationError(Exception):
    """Exception for file operation failures."""

    pass


def ensure_directory_exists(directory: Path) -> None:
    """Ensure a directory exists, creating it if necessary."""
    try:
        directory.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Ensured directory exists: {directory}")
    except OSError as e:
        raise FileOperationError(f"Failed to create directory {directory}: {e}")


def write_json_export(data: Any, destination: Path) -> Path:
    """
    Write data to a JSON file.

    Args:
        data: JSON-serializable data, typically a list of Plex items
        destination: Output file path; parent directories are created

    Returns:
        The path that was written
    """
    ensure_directory_exists(destination.parent)

    try:
        with destination.open("w", encoding="utf-8") as fh:
            json.dump(data, fh, indent=2, ensure_ascii=False)
            fh.write("\n")
    except (OSError, TypeError, ValueError) as e:
        raise FileOperationError(f"Failed to write export {destination}: {e}")

    logger.info(f"Wrote export: {destination}")
    return destination
