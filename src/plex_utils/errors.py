"""
Exception hierarchy for the Plex client.

Construction and token refresh errors propagate to the caller. Transport
errors fail a single request. Decode errors are raised by the low-level
decoder only; the dispatcher converts them into empty content.
"""

from typing import Any, Dict, Optional


class PlexToolsError(Exception):
    """Base exception for Plex client errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message} (caused by {type(self.cause).__name__}: {self.cause})"
        return self.message


class InvalidArgumentError(PlexToolsError, ValueError):
    """Exception for invalid arguments, such as an empty token."""

    pass


class TransportError(PlexToolsError):
    """Exception for network failures: refused connections, timeouts, TLS errors."""

    pass


class AuthenticationError(PlexToolsError):
    """Exception for failures to obtain a token from plex.tv."""

    pass


class DecodeError(PlexToolsError):
    """Exception for a response body that does not match its declared format."""

    pass


class EncodeError(PlexToolsError):
    """Exception for a request body that cannot be serialized."""

    pass
