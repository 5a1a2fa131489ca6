"""
Request dispatcher for the Plex Media Server API.

This module turns an endpoint, query parameters, headers and a body into an
HTTP call and a decoded PlexResponse. Dispatch runs on a shared thread pool
and returns a concurrent.futures.Future; invoke_plex_request() blocks on it.

A non-2xx status is not an error here: callers inspect status_code and may
pass the response to plex_utils.diagnostics for a readable explanation.
"""

import concurrent.futures
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote

import requests

from common.constants import FORMAT_JSON, REQUEST_WORKERS

from .connection import PlexToolsConnection
from .errors import DecodeError, InvalidArgumentError, TransportError
from .formats import accept_header, content_type_header, decode_body, encode_body, normalize_format

logger = logging.getLogger(__name__)

SUPPORTED_METHODS = ("GET", "POST")
TOKEN_HEADER = "X-Plex-Token"

_executor = concurrent.futures.ThreadPoolExecutor(
    max_workers=REQUEST_WORKERS,
    thread_name_prefix="plex-request",
)


@dataclass(frozen=True)
class PlexResponse:
    """Result of one Plex API call."""

    status_code: int
    reason: str
    headers: Dict[str, str] = field(default_factory=dict)
    content: Any = None
    url: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


def encode_query(query: Optional[Mapping[str, Any]]) -> str:
    """
    Build a query string from a mapping.

    Keys and values are percent-encoded per RFC 3986. Keys whose value is
    empty or None are emitted without '='.
    """
    if not query:
        return ""

    parts = []
    for key, value in query.items():
        encoded_key = quote(str(key), safe="")
        if value is None or value == "":
            parts.append(encoded_key)
        else:
            parts.append(f"{encoded_key}={quote(str(value), safe='')}")
    return "&".join(parts)


def build_url(server_url: str, endpoint: str, query: Optional[Mapping[str, Any]] = None) -> str:
    """Join the server URL and a relative endpoint, then append the query string."""
    url = f"{server_url}/{endpoint.lstrip('/')}".rstrip("/")
    query_string = encode_query(query)
    if query_string:
        url = f"{url}?{query_string}"
    return url


def build_headers(
        connection: PlexToolsConnection,
        headers: Optional[Mapping[str, str]] = None,
        request_format: str = FORMAT_JSON,
) -> Dict[str, str]:
    """Merge connection defaults, additional headers, Accept and the token header."""
    merged = connection.get_headers()
    if headers:
        merged.update(headers)
    merged["Accept"] = accept_header(request_format)
    merged[TOKEN_HEADER] = connection.token
    return merged


def _redact(headers: Mapping[str, str]) -> Dict[str, str]:
    return {key: ("***" if key == TOKEN_HEADER else value) for key, value in headers.items()}


def _perform_request(
        connection: PlexToolsConnection,
        method: str,
        url: str,
        headers: Dict[str, str],
        data: Optional[str],
        response_format: str,
        log: logging.Logger,
) -> PlexResponse:
    log.debug(f"Plex API request: {method} {url}")
    log.debug(f"Request headers: {_redact(headers)}")

    try:
        with requests.Session() as session:
            response = session.request(
                method,
                url,
                headers=headers,
                data=data.encode("utf-8") if data is not None else None,
                timeout=connection.timeout_seconds,
            )
    except requests.exceptions.RequestException as e:
        log.error(f"Plex request failed: {method} {url}: {e}")
        raise TransportError(
            f"{method} {url} failed",
            details={"method": method, "url": url},
            cause=e,
        )

    text = response.text
    try:
        content = decode_body(text, response_format)
    except DecodeError as e:
        log.debug(f"Could not decode {response_format} response from {url}: {e}")
        content = None

    log.debug(f"Plex API response: {response.status_code} {response.reason} ({len(text)} chars)")

    return PlexResponse(
        status_code=response.status_code,
        reason=response.reason or "",
        headers=dict(response.headers),
        content=content,
        url=url,
    )


def invoke_plex_request_async(
        connection: PlexToolsConnection,
        endpoint: str,
        method: str = "GET",
        query: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        body: Any = None,
        request_format: str = FORMAT_JSON,
        response_format: str = FORMAT_JSON,
        log: Optional[logging.Logger] = None,
) -> "concurrent.futures.Future[PlexResponse]":
    """
    Dispatch a Plex API request without blocking.

    Args:
        connection: Connection supplying the server URL, token and default headers
        endpoint: Path relative to the server URL, e.g. "library/sections"
        method: "GET" or "POST"
        query: Query parameters; empty values are sent as bare keys
        headers: Additional headers, applied over the connection defaults
        body: POST body; serialized according to request_format
        request_format: "Json", "Xml" or "Raw"; selects Accept and Content-Type
        response_format: "Json", "Xml" or "Raw"; selects how the body is decoded
        log: Logger for this call, defaults to the module logger

    Returns:
        A Future resolving to a PlexResponse, or raising TransportError

    Raises:
        InvalidArgumentError: For an unsupported method or format
        EncodeError: If the body cannot be serialized
    """
    log = log or logger
    method = method.upper()
    if method not in SUPPORTED_METHODS:
        raise InvalidArgumentError(f"Unsupported HTTP method: {method}")

    request_format = normalize_format(request_format)
    response_format = normalize_format(response_format)

    url = build_url(connection.server_url, endpoint, query)
    request_headers = build_headers(connection, headers, request_format)

    data = None
    if method == "POST" and body is not None:
        data = encode_body(body, request_format)
        request_headers["Content-Type"] = content_type_header(request_format)

    return _executor.submit(
        _perform_request,
        connection,
        method,
        url,
        request_headers,
        data,
        response_format,
        log,
    )


def invoke_plex_request(
        connection: PlexToolsConnection,
        endpoint: str,
        method: str = "GET",
        query: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        body: Any = None,
        request_format: str = FORMAT_JSON,
        response_format: str = FORMAT_JSON,
        log: Optional[logging.Logger] = None,
) -> PlexResponse:
    """Dispatch a Plex API request and wait for the response."""
    future = invoke_plex_request_async(
        connection,
        endpoint,
        method=method,
        query=query,
        headers=headers,
        body=body,
        request_format=request_format,
        response_format=response_format,
        log=log,
    )
    return future.result()
