"""
Human-readable diagnostics for Plex API failures.

These helpers only explain; they never raise, retry or change a response.
"""

import logging
from typing import Optional

from .request import PlexResponse

logger = logging.getLogger(__name__)


def classify_status(status_code: int, url: str = "") -> str:
    """Return an operator-readable explanation for an HTTP status code, or "" for 2xx."""
    if 200 <= status_code < 300:
        return ""
    if status_code == 401:
        return "Authentication failed (401): the Plex token is missing, invalid or expired. Check the token."
    if status_code == 403:
        return "Permission denied (403): this account is not allowed to access the requested resource."
    if status_code == 404:
        return f"Resource not found (404): {url}"
    if status_code == 500:
        return "Plex server error (500): the server failed to handle the request. Try again later."
    return f"Unexpected HTTP error {status_code}"


def describe_transport_error(error: BaseException, url: str = "") -> str:
    """Return an operator-readable explanation for a failed connection."""
    cause = getattr(error, "cause", None) or error
    target = f" to {url}" if url else ""
    return f"Could not reach the Plex server{target}: {type(cause).__name__}: {cause}"


def log_response_diagnostics(
        response: PlexResponse,
        url: Optional[str] = None,
        log: Optional[logging.Logger] = None,
) -> str:
    """
    Log the classifier message for a non-2xx response.

    Returns the message that was logged ("" when the response succeeded).
    """
    log = log or logger
    message = classify_status(response.status_code, url or response.url)
    if not message:
        return message

    if response.status_code >= 500 or response.status_code in (401, 403):
        log.error(message)
    else:
        log.warning(message)
    return message
