"""
Plex library client for listing sections, items and metadata.

This module provides a small interface over the Plex Media Server library
endpoints. Non-2xx responses are explained in the log and turned into empty
results; connection failures propagate as TransportError.
"""

import logging
from typing import Any, Dict, List, Optional

from common.constants import DEFAULT_PAGE_SIZE

from .connection import PlexToolsConnection
from .diagnostics import log_response_diagnostics
from .pagination import extract_page_items, get_paginated_items
from .request import invoke_plex_request

logger = logging.getLogger(__name__)


class PlexLibraryClient:
    """Client for the library endpoints of a Plex Media Server."""

    def __init__(
            self,
            connection: PlexToolsConnection,
            page_size: int = DEFAULT_PAGE_SIZE,
            log: Optional[logging.Logger] = None,
    ):
        self.connection = connection
        self.page_size = page_size
        self.log = log or logger

    def _get(self, endpoint: str, query: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        """GET an endpoint and return its decoded content, or None for a non-2xx response."""
        response = invoke_plex_request(self.connection, endpoint, query=query, log=self.log)
        if not response.ok:
            log_response_diagnostics(response, log=self.log)
            return None
        return response.content

    def get_server_identity(self) -> Dict[str, Any]:
        """Get the server's machine identifier and version."""
        self.log.debug(f"Getting server identity from {self.connection.server_url}")
        content = self._get("identity")
        if not isinstance(content, dict):
            return {}
        return content.get("MediaContainer", {})

    def get_sections(self) -> List[Dict[str, Any]]:
        """List the library sections (Movies, TV Shows, Music, ...)."""
        content = self._get("library/sections")
        sections = extract_page_items(content) or []
        self.log.info(f"Plex returned {len(sections)} library sections")

        for section in sections:
            self.log.debug(f"  {section.get('key')}: {section.get('title')} ({section.get('type')})")

        return sections

    def find_section(self, title: str) -> Optional[Dict[str, Any]]:
        """Find a library section by title, ignoring case."""
        wanted = title.strip().lower()
        for section in self.get_sections():
            if str(section.get("title", "")).lower() == wanted:
                return section

        self.log.warning(f"No library section named '{title}'")
        return None

    def get_section_items(self, section_id: str, **filters: Any) -> List[Dict[str, Any]]:
        """
        Get every item in a library section.

        Keyword arguments are passed as query filters, e.g. ``type=4`` for
        episodes or ``unwatched=1``.
        """
        self.log.info(f"Fetching items for library section {section_id}")
        return get_paginated_items(
            self.connection,
            f"library/sections/{section_id}/all",
            query=filters or None,
            page_size=self.page_size,
            log=self.log,
        )

    def get_metadata(self, rating_key: str) -> Optional[Dict[str, Any]]:
        """Get the metadata of a single item, or None if it does not exist."""
        self.log.debug(f"Getting metadata for rating key: {rating_key}")
        items = extract_page_items(self._get(f"library/metadata/{rating_key}"))
        if not items:
            return None
        return items[0]

    def refresh_section(self, section_id: str, path: Optional[str] = None) -> bool:
        """
        Ask Plex to scan a library section.

        Args:
            section_id: Library section key
            path: Optional folder inside the section to limit the scan to

        Returns:
            True if Plex accepted the request
        """
        query = {"path": path} if path else None
        response = invoke_plex_request(
            self.connection,
            f"library/sections/{section_id}/refresh",
            query=query,
            log=self.log,
        )
        if not response.ok:
            log_response_diagnostics(response, log=self.log)
            return False

        self.log.info(f"Requested refresh of library section {section_id}" + (f" ({path})" if path else ""))
        return True

    def search(self, query: str) -> List[Dict[str, Any]]:
        """Search all libraries by title."""
        self.log.info(f"Searching Plex for: '{query}'")
        results = get_paginated_items(
            self.connection,
            "search",
            query={"query": query},
            page_size=self.page_size,
            log=self.log,
        )
        if not results:
            self.log.warning(f"No Plex results found for: '{query}'")
        return results
