"""Test the library client"""

from urllib.parse import urlsplit

import pytest
import requests

from conftest import make_response, media_container
from plex_utils import PlexLibraryClient, TransportError

SECTIONS = [
    {"key": "1", "title": "Movies", "type": "movie"},
    {"key": "2", "title": "TV Shows", "type": "show"},
]


@pytest.fixture
def library(connection):
    return PlexLibraryClient(connection, page_size=10)


def requested_path(mock_request):
    return urlsplit(mock_request.call_args.args[1]).path


class TestLibraryClient:
    """Test library helpers"""

    def test_get_server_identity(self, library, mock_request):
        """Test the identity container is returned"""
        mock_request.return_value = make_response(
            200, {"MediaContainer": {"machineIdentifier": "abc", "version": "1.40"}}
        )

        assert library.get_server_identity() == {"machineIdentifier": "abc", "version": "1.40"}
        assert requested_path(mock_request) == "/identity"

    def test_get_sections(self, library, mock_request):
        """Test sections are read from the directory list"""
        mock_request.return_value = make_response(200, media_container(SECTIONS, "Directory"))

        assert library.get_sections() == SECTIONS
        assert requested_path(mock_request) == "/library/sections"

    def test_get_sections_unauthorized(self, library, mock_request):
        """Test an error status yields no sections"""
        mock_request.return_value = make_response(401, "Unauthorized", reason="Unauthorized")

        assert library.get_sections() == []

    def test_find_section(self, library, mock_request):
        """Test section lookup ignores case"""
        mock_request.return_value = make_response(200, media_container(SECTIONS, "Directory"))

        assert library.find_section("tv shows")["key"] == "2"
        assert library.find_section("Music") is None

    def test_get_section_items(self, library, mock_request):
        """Test items are fetched with pagination and filters"""
        mock_request.return_value = make_response(200, media_container([{"ratingKey": "10"}]))

        assert library.get_section_items("1", unwatched=1) == [{"ratingKey": "10"}]
        url = mock_request.call_args.args[1]
        assert urlsplit(url).path == "/library/sections/1/all"
        assert "unwatched=1" in url
        assert "X-Plex-Container-Size=10" in url

    def test_get_metadata(self, library, mock_request):
        """Test a single item is returned"""
        mock_request.return_value = make_response(200, media_container([{"ratingKey": "42", "title": "Heat"}]))

        assert library.get_metadata("42")["title"] == "Heat"
        assert requested_path(mock_request) == "/library/metadata/42"

    def test_get_metadata_not_found(self, library, mock_request):
        """Test a missing item yields None"""
        mock_request.return_value = make_response(404, "Not Found", reason="Not Found")

        assert library.get_metadata("999") is None

    def test_refresh_section(self, library, mock_request):
        """Test a scan request with a path"""
        mock_request.return_value = make_response(200, "")

        assert library.refresh_section("2", path="/media/TV Shows") is True
        url = mock_request.call_args.args[1]
        assert urlsplit(url).path == "/library/sections/2/refresh"
        assert "path=%2Fmedia%2FTV%20Shows" in url

    def test_refresh_section_forbidden(self, library, mock_request):
        """Test a refused scan returns False"""
        mock_request.return_value = make_response(403, "Forbidden", reason="Forbidden")

        assert library.refresh_section("2") is False

    def test_search(self, library, mock_request):
        """Test search results are collected"""
        mock_request.return_value = make_response(200, media_container([{"title": "The Office"}]))

        assert library.search("office") == [{"title": "The Office"}]
        assert "query=office" in mock_request.call_args.args[1]

    def test_transport_errors_propagate(self, library, mock_request):
        """Test connection failures reach the caller"""
        mock_request.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(TransportError):
            library.get_sections()
