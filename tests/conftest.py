"""Test configuration and fixtures"""

import json
import sys
from pathlib import Path
from unittest.mock import patch

import pytest
import requests

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from plex_utils import PlexCredential, PlexToolsConnection


def make_response(status_code=200, body=None, headers=None, reason="OK"):
    """Build a requests.Response as the Plex server would return it"""
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    if body is None:
        text = ""
    elif isinstance(body, str):
        text = body
    else:
        text = json.dumps(body)
    response._content = text.encode("utf-8")
    response.encoding = "utf-8"
    response.headers.update(headers or {"Content-Type": "application/json"})
    return response


def media_container(items, key="Metadata"):
    """Wrap items the way Plex wraps list results"""
    return {"MediaContainer": {"size": len(items), key: items}}


@pytest.fixture
def credential():
    return PlexCredential("plexuser", "s3cret")


@pytest.fixture
def connection(credential):
    return PlexToolsConnection(credential, "http://plex.local:32400/", "token-abc")


@pytest.fixture
def mock_request():
    """Patch the HTTP layer; configure return_value or side_effect per test"""
    with patch.object(requests.Session, "request") as mocked:
        yield mocked
