"""Test the status classifier"""

import logging

import requests

from plex_utils import (
    PlexResponse,
    TransportError,
    classify_status,
    describe_transport_error,
    log_response_diagnostics,
)


class TestClassifyStatus:
    """Test status code messages"""

    def test_not_found_includes_url(self):
        """Test 404 names the failing URL"""
        message = classify_status(404, "/library/999")
        assert "not found" in message.lower()
        assert "/library/999" in message

    def test_known_statuses(self):
        """Test each mapped status"""
        assert "token" in classify_status(401).lower()
        assert "permission denied" in classify_status(403).lower()
        assert "try again later" in classify_status(500).lower()

    def test_unexpected_status(self):
        """Test the generic message"""
        assert classify_status(418) == "Unexpected HTTP error 418"
        assert classify_status(503) == "Unexpected HTTP error 503"

    def test_success(self):
        """Test 2xx yields no message"""
        assert classify_status(200) == ""
        assert classify_status(204) == ""


class TestTransportDiagnostics:
    """Test connection failure messages"""

    def test_describe_transport_error(self):
        """Test the underlying cause is named"""
        error = TransportError("GET failed", cause=requests.exceptions.ConnectTimeout("timed out"))
        message = describe_transport_error(error, "http://plex.local:32400/identity")
        assert "http://plex.local:32400/identity" in message
        assert "ConnectTimeout" in message


class TestLogResponseDiagnostics:
    """Test advisory logging"""

    def test_logs_without_altering_response(self, caplog):
        """Test the envelope is unchanged and the message is logged"""
        response = PlexResponse(404, "Not Found", {}, None, "http://h/library/999")

        with caplog.at_level(logging.WARNING):
            message = log_response_diagnostics(response)

        assert "http://h/library/999" in message
        assert message in caplog.text
        assert response == PlexResponse(404, "Not Found", {}, None, "http://h/library/999")

    def test_auth_failures_logged_as_errors(self, caplog):
        """Test 401 is logged at error level"""
        response = PlexResponse(401, "Unauthorized", url="http://h/library/sections")

        with caplog.at_level(logging.WARNING):
            log_response_diagnostics(response)

        assert caplog.records[-1].levelno == logging.ERROR

    def test_success_logs_nothing(self, caplog):
        """Test 2xx produces no diagnostics"""
        with caplog.at_level(logging.DEBUG):
            assert log_response_diagnostics(PlexResponse(200, "OK")) == ""
        assert caplog.records == []
