"""Test connection state and token refresh"""

import threading
from unittest.mock import Mock

import pytest

from plex_utils import (
    AuthenticationError,
    InvalidArgumentError,
    PlexCredential,
    PlexToolsConnection,
)


class TestConnection:
    """Test PlexToolsConnection construction and accessors"""

    def test_strips_one_trailing_slash(self, credential):
        """Test server URL normalization"""
        connection = PlexToolsConnection(credential, "http://h/", "token")
        assert connection.server_url == "http://h"

        connection = PlexToolsConnection(credential, "http://h", "token")
        assert connection.server_url == "http://h"

    def test_does_not_mutate_credential(self, credential):
        """Test the credential is stored untouched"""
        PlexToolsConnection(credential, "http://h/", "token")
        assert credential == PlexCredential("plexuser", "s3cret")

    def test_defaults(self, connection):
        """Test default timeout and token"""
        assert connection.timeout_seconds == 30
        assert connection.token == "token-abc"

    def test_requires_token(self, credential):
        """Test an empty token is rejected"""
        with pytest.raises(InvalidArgumentError):
            PlexToolsConnection(credential, "http://h", "")
        with pytest.raises(InvalidArgumentError):
            PlexToolsConnection(credential, "http://h", None)

    def test_requires_credential(self):
        """Test an empty credential is rejected"""
        with pytest.raises(InvalidArgumentError):
            PlexToolsConnection(None, "http://h", "token")
        with pytest.raises(InvalidArgumentError):
            PlexToolsConnection(PlexCredential("", ""), "http://h", "token")

    def test_get_headers_returns_independent_copies(self, connection):
        """Test header copies cannot change shared state"""
        first = connection.get_headers()
        second = connection.get_headers()

        assert first == second
        assert first is not second

        first["X-Plex-Product"] = "changed"
        first["X-Extra"] = "1"
        assert second["X-Plex-Product"] != "changed"
        assert "X-Extra" not in connection.get_headers()

    def test_default_headers_identify_client(self, connection):
        """Test the client identity headers are present"""
        headers = connection.get_headers()
        for name in (
                "X-Plex-Platform",
                "X-Plex-Product",
                "X-Plex-Client-Identifier",
                "X-Plex-Device-Name",
        ):
            assert headers[name]
        assert "X-Plex-Token" not in headers

    def test_repr_hides_password(self, connection):
        """Test secrets stay out of repr"""
        assert "s3cret" not in repr(connection)
        assert "token-abc" not in repr(connection)


class TestRefreshToken:
    """Test token refresh through the authenticator"""

    def test_refresh_replaces_token(self, credential):
        """Test a refreshed token is stored and returned"""
        authenticator = Mock(return_value="token-new")
        connection = PlexToolsConnection(credential, "http://h", "token-old", authenticator=authenticator)

        assert connection.refresh_token() == "token-new"
        assert connection.token == "token-new"

        args, kwargs = authenticator.call_args
        assert args[0] is credential
        assert kwargs["timeout"] == 30
        assert "X-Plex-Client-Identifier" in kwargs["headers"]

    def test_failed_refresh_keeps_old_token(self, credential):
        """Test the old token survives an authentication failure"""
        authenticator = Mock(side_effect=AuthenticationError("rejected"))
        connection = PlexToolsConnection(credential, "http://h", "token-old", authenticator=authenticator)

        with pytest.raises(AuthenticationError):
            connection.refresh_token()
        assert connection.token == "token-old"

    def test_concurrent_refreshes_are_serialized(self, credential):
        """Test only one refresh runs at a time"""
        active = []
        overlaps = []
        counter = iter(range(100))

        def authenticator(_credential, headers=None, timeout=None):
            active.append(1)
            if len(active) > 1:
                overlaps.append(len(active))
            token = f"token-{next(counter)}"
            active.pop()
            return token

        connection = PlexToolsConnection(credential, "http://h", "token-old", authenticator=authenticator)
        threads = [threading.Thread(target=connection.refresh_token) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert overlaps == []
        assert connection.token.startswith("token-")
        assert connection.token != "token-old"
