"""
Plex utilities package for Plex Tools.

This package contains the Plex Media Server HTTP client: connection state,
request dispatch, pagination, diagnostics and library helpers.
"""

from .auth import sign_in
from .connection import PlexCredential, PlexToolsConnection, default_client_headers
from .diagnostics import classify_status, describe_transport_error, log_response_diagnostics
from .errors import (
    AuthenticationError,
    DecodeError,
    EncodeError,
    InvalidArgumentError,
    PlexToolsError,
    TransportError,
)
from .library import PlexLibraryClient
from .pagination import PAGE_SHAPES, extract_page_items, get_paginated_items
from .request import (
    PlexResponse,
    build_url,
    encode_query,
    invoke_plex_request,
    invoke_plex_request_async,
)

__all__ = [
    # Connection
    "PlexCredential",
    "PlexToolsConnection",
    "default_client_headers",
    "sign_in",
    # Requests
    "PlexResponse",
    "build_url",
    "encode_query",
    "invoke_plex_request",
    "invoke_plex_request_async",
    # Pagination
    "PAGE_SHAPES",
    "extract_page_items",
    "get_paginated_items",
    # Diagnostics
    "classify_status",
    "describe_transport_error",
    "log_response_diagnostics",
    # Library
    "PlexLibraryClient",
    # Errors
    "AuthenticationError",
    "DecodeError",
    "EncodeError",
    "InvalidArgumentError",
    "PlexToolsError",
    "TransportError",
]
