"""
Paginated fetching of Plex list endpoints.

Plex returns large lists in windows selected by a start offset and a page
size. get_paginated_items() walks the windows one at a time and concatenates
the items until a short page marks the end of the list.
"""

import logging
from typing import Any, List, Mapping, Optional, Tuple

from common.constants import (
    DEFAULT_PAGE_SIZE,
    FORMAT_JSON,
    PAGE_SIZE_PARAM,
    PAGE_START_PARAM,
)

from .connection import PlexToolsConnection
from .diagnostics import describe_transport_error, log_response_diagnostics
from .errors import InvalidArgumentError, TransportError
from .request import invoke_plex_request

logger = logging.getLogger(__name__)

# Recognized page layouts, tried in order: (container key, item list key).
# JSON responses use Directory or Metadata; XML responses name items by type.
PAGE_SHAPES: List[Tuple[str, str]] = [
    ("MediaContainer", "Directory"),
    ("MediaContainer", "Metadata"),
    ("MediaContainer", "Video"),
    ("MediaContainer", "Track"),
    ("MediaContainer", "Photo"),
]


def extract_page_items(content: Any) -> Optional[List[Any]]:
    """Return the item list of a decoded page, or None if no known shape matches."""
    if not isinstance(content, dict):
        return None

    for container_key, items_key in PAGE_SHAPES:
        container = content.get(container_key)
        if not isinstance(container, dict):
            continue
        items = container.get(items_key)
        if isinstance(items, list):
            return items

    return None


def get_paginated_items(
        connection: PlexToolsConnection,
        endpoint: str,
        query: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        request_format: str = FORMAT_JSON,
        response_format: str = FORMAT_JSON,
        start_param: str = PAGE_START_PARAM,
        size_param: str = PAGE_SIZE_PARAM,
        log: Optional[logging.Logger] = None,
) -> List[Any]:
    """
    Fetch every item of a Plex list endpoint.

    Pages are requested strictly in sequence. The loop stops when a page has
    fewer than ``page_size`` items, so a list whose length is an exact multiple
    of ``page_size`` costs one extra, empty request. It also stops when a page
    has no recognizable item list, which covers empty libraries and malformed
    or error responses alike.

    Args:
        connection: Connection to the Plex server
        endpoint: List endpoint relative to the server URL
        query: Base query parameters, sent with every page
        headers: Additional request headers
        page_size: Number of items requested per page
        request_format: Format for the Accept header
        response_format: Format used to decode each page
        start_param: Query parameter carrying the offset
        size_param: Query parameter carrying the page size
        log: Logger for this call, defaults to the module logger

    Returns:
        All items in the order the pages arrived

    Raises:
        InvalidArgumentError: If page_size is not positive
        TransportError: If the first page cannot be fetched. Failures on later
            pages are logged and the items collected so far are returned.
    """
    log = log or logger
    if page_size < 1:
        raise InvalidArgumentError(f"page_size must be positive, got {page_size}")

    items: List[Any] = []
    offset = 0
    pages = 0

    while True:
        page_query = dict(query or {})
        page_query[start_param] = offset
        page_query[size_param] = page_size

        try:
            response = invoke_plex_request(
                connection,
                endpoint,
                method="GET",
                query=page_query,
                headers=headers,
                request_format=request_format,
                response_format=response_format,
                log=log,
            )
        except TransportError as e:
            if pages == 0:
                raise
            log.error(describe_transport_error(e, endpoint))
            log.warning(f"Returning {len(items)} items collected from {endpoint} before the failure")
            break

        pages += 1
        log_response_diagnostics(response, log=log)

        page_items = extract_page_items(response.content)
        if page_items is None:
            log.debug(f"No item list in page {pages} of {endpoint}; stopping")
            break

        items.extend(page_items)
        log.debug(f"Fetched page {pages} of {endpoint}: {len(page_items)} items at offset {offset}")

        if len(page_items) < page_size:
            break
        offset += page_size

    log.info(f"Fetched {len(items)} items from {endpoint} in {pages} pages")
    return items
