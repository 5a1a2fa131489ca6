"""
plex.tv authentication for obtaining Plex tokens from account credentials.
"""

import logging
from typing import Dict, Optional

import requests

from common.constants import DEFAULT_TIMEOUT, PLEX_SIGN_IN_URL

from .errors import AuthenticationError

logger = logging.getLogger(__name__)


def sign_in(
        credential,
        headers: Optional[Dict[str, str]] = None,
        timeout: int = DEFAULT_TIMEOUT,
        sign_in_url: str = PLEX_SIGN_IN_URL,
) -> str:
    """
    Sign in to plex.tv and return a fresh authentication token.

    Args:
        credential: PlexCredential holding the account username and password
        headers: X-Plex-* client identity headers to send
        timeout: Request timeout in seconds
        sign_in_url: plex.tv sign-in endpoint

    Returns:
        The authentication token string

    Raises:
        AuthenticationError: If the request fails, is rejected, or the
            response carries no token
    """
    request_headers = dict(headers or {})
    request_headers["Accept"] = "application/json"

    logger.debug(f"Requesting Plex token for user: {credential.username}")

    try:
        response = requests.post(
            sign_in_url,
            headers=request_headers,
            auth=(credential.username, credential.password),
            timeout=timeout,
        )
    except requests.exceptions.RequestException as e:
        logger.error(f"plex.tv sign-in request failed: {e}")
        raise AuthenticationError("plex.tv sign-in request failed", cause=e)

    if response.status_code not in (200, 201):
        logger.error(f"plex.tv sign-in rejected: HTTP {response.status_code}")
        raise AuthenticationError(
            f"plex.tv sign-in rejected with HTTP {response.status_code}",
            details={"status_code": response.status_code},
        )

    try:
        payload = response.json()
    except ValueError as e:
        raise AuthenticationError("plex.tv sign-in returned invalid JSON", cause=e)

    user = payload.get("user") if isinstance(payload, dict) else None
    if not isinstance(user, dict):
        raise AuthenticationError("No user record in plex.tv response")

    token = user.get("authToken") or user.get("authentication_token")
    if not token:
        raise AuthenticationError("No authentication token in plex.tv response")

    logger.info("Obtained Plex authentication token from plex.tv")
    return token
