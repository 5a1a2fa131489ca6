"""
Connection state for a Plex Media Server session.

A PlexToolsConnection holds the server URL, the authentication token, the
credential used to refresh it, and the default client headers. It performs no
I/O itself except when asked to refresh the token.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from common.constants import (
    DEFAULT_TIMEOUT,
    PLEX_CLIENT_IDENTIFIER,
    PLEX_DEVICE,
    PLEX_DEVICE_NAME,
    PLEX_PLATFORM,
    PLEX_PLATFORM_VERSION,
    PLEX_PRODUCT,
    PLEX_VERSION,
)

from .auth import sign_in
from .errors import InvalidArgumentError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlexCredential:
    """plex.tv account credential used to obtain tokens."""

    username: str
    password: str = field(repr=False)

    def __bool__(self) -> bool:
        return bool(self.username) and bool(self.password)


def default_client_headers() -> Dict[str, str]:
    """X-Plex-* headers identifying this client to Plex and plex.tv."""
    return {
        "X-Plex-Platform": PLEX_PLATFORM,
        "X-Plex-Platform-Version": PLEX_PLATFORM_VERSION,
        "X-Plex-Product": PLEX_PRODUCT,
        "X-Plex-Version": PLEX_VERSION,
        "X-Plex-Device": PLEX_DEVICE,
        "X-Plex-Device-Name": PLEX_DEVICE_NAME,
        "X-Plex-Client-Identifier": PLEX_CLIENT_IDENTIFIER,
    }


class PlexToolsConnection:
    """Server URL, token and default headers for one Plex session."""

    def __init__(
            self,
            credential: PlexCredential,
            server_url: str,
            token: str,
            timeout_seconds: int = DEFAULT_TIMEOUT,
            authenticator: Optional[Callable[..., str]] = None,
    ):
        """
        Initialize the connection.

        Args:
            credential: Account credential, kept for token refresh
            server_url: Base URL of the Plex server, e.g. http://localhost:32400
            token: Current X-Plex-Token
            timeout_seconds: Per-request timeout
            authenticator: Callable taking (credential, headers=, timeout=) and
                returning a new token; defaults to plex.tv sign-in

        Raises:
            InvalidArgumentError: If credential or token is empty
        """
        if not credential:
            raise InvalidArgumentError("A Plex credential is required")
        if not token:
            raise InvalidArgumentError("A Plex token is required")

        self.credential = credential
        self.server_url = server_url.strip()
        if self.server_url.endswith("/"):
            self.server_url = self.server_url[:-1]
        self.timeout_seconds = timeout_seconds

        self._token = token
        self._headers = default_client_headers()
        self._authenticator = authenticator or sign_in
        self._token_lock = threading.Lock()

        logger.debug(f"Plex connection initialized for server: {self.server_url}")

    @property
    def token(self) -> str:
        with self._token_lock:
            return self._token

    def get_headers(self) -> Dict[str, str]:
        """Return a copy of the default client headers."""
        return dict(self._headers)

    def refresh_token(self) -> str:
        """
        Obtain a new token from the stored credential and replace the current one.

        Concurrent refreshes are serialized; requests reading the token during a
        refresh wait for it to finish.

        Raises:
            AuthenticationError: If plex.tv does not issue a token. The previous
                token is left in place.
        """
        with self._token_lock:
            logger.info(f"Refreshing Plex token for {self.server_url}")
            new_token = self._authenticator(
                self.credential,
                headers=self.get_headers(),
                timeout=self.timeout_seconds,
            )
            self._token = new_token
            return new_token

    def __repr__(self) -> str:
        return f"PlexToolsConnection(server_url={self.server_url!r}, credential={self.credential!r})"
