#!/usr/bin/env python3
"""
Plex Query: Command line access to a Plex Media Server library.

This script talks to a Plex server by:
- Showing the server identity
- Listing library sections and the items inside a section
- Searching all libraries by title
- Triggering a library section scan
- Refreshing the Plex token from plex.tv credentials
- Printing results as JSON or exporting them to a file
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Optional

# Add the src directory to Python path for imports
sys.path.insert(0, str(Path(__file__).parent))

from common import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_PAGE_SIZE,
    LOG_DIR,
    LOG_LEVELS,
    PLEX_PASSWORD,
    PLEX_TOKEN,
    PLEX_URL,
    PLEX_USERNAME,
    FileOperationError,
    setup_logging,
    write_json_export,
)
from plex_utils import (
    PlexCredential,
    PlexLibraryClient,
    PlexToolsConnection,
    PlexToolsError,
    default_client_headers,
    sign_in,
)


class PlexQuery:
    """Runs one query against a Plex server and reports the result."""

    def __init__(
            self,
            server_url: str,
            username: Optional[str],
            password: Optional[str],
            token: Optional[str] = None,
            page_size: int = DEFAULT_PAGE_SIZE,
            log_level: str = DEFAULT_LOG_LEVEL,
            output: Optional[str] = None,
    ):
        """
        Initialize the query runner.

        Args:
            server_url: Base URL of the Plex server
            username: plex.tv username
            password: plex.tv password
            token: Existing X-Plex-Token; obtained from plex.tv when missing
            page_size: Items requested per page for list commands
            log_level: Logging level
            output: File to write JSON results to instead of stdout
        """
        self.output = Path(output) if output else None

        self.logger = setup_logging(
            log_level=log_level,
            log_dir=Path(LOG_DIR),
            enable_console=True,
        )

        credential = PlexCredential(username or "", password or "")
        if not credential:
            raise PlexToolsError("plex.tv credentials are required. Set PLEX_USERNAME and PLEX_PASSWORD.")

        # Only sign in when no token was supplied
        self.signed_in = not token
        if self.signed_in:
            self.logger.info("No Plex token configured, signing in to plex.tv")
            token = sign_in(credential, headers=default_client_headers())

        self.connection = PlexToolsConnection(credential, server_url, token)
        self.library = PlexLibraryClient(self.connection, page_size=page_size, log=self.logger.logger)

        self.logger.info("Plex Query initialized", server=self.connection.server_url)

    def run(self, command: str, args: argparse.Namespace) -> Any:
        """Run a subcommand and emit its result."""
        if command == "identity":
            result = self.library.get_server_identity()
        elif command == "sections":
            result = self.library.get_sections()
        elif command == "items":
            result = self.library.get_section_items(args.section)
            self.logger.log_pagination(f"library/sections/{args.section}/all", self._pages(result), len(result))
        elif command == "search":
            result = self.library.search(args.query)
        elif command == "refresh":
            result = self.library.refresh_section(args.section, args.path)
            self.logger.log_plex_request(
                "GET",
                f"{self.connection.server_url}/library/sections/{args.section}/refresh",
                success=result,
            )
        elif command == "token":
            result = self.connection.token if self.signed_in else self.connection.refresh_token()
        else:
            raise PlexToolsError(f"Unknown command: {command}")

        self._emit(result)
        return result

    def _pages(self, items: list) -> int:
        # One extra request is made when the last page is exactly full
        return len(items) // self.library.page_size + 1

    def _emit(self, result: Any) -> None:
        if self.output:
            write_json_export(result, self.output)
            self.logger.info(f"Results written to: {self.output}")
        elif isinstance(result, str):
            print(result)
        else:
            print(json.dumps(result, indent=2, ensure_ascii=False))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Plex query tool - inspect libraries and trigger scans on a Plex Media Server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
 Examples:
   %(prog)s sections                          # List library sections
   %(prog)s items 1 --page-size 200           # List every item in section 1
   %(prog)s search "The Office"               # Search all libraries
   %(prog)s refresh 2 --path "/media/TV"      # Scan part of section 2
   %(prog)s token                             # Print a fresh token
   %(prog)s items 1 --output items.json       # Export items to a file
        """,
    )

    parser.add_argument("--server", default=PLEX_URL, help=f"Plex server URL (default: {PLEX_URL})")
    parser.add_argument("--token", default=PLEX_TOKEN, help="Plex token (default: PLEX_TOKEN)")
    parser.add_argument("--username", default=PLEX_USERNAME, help="plex.tv username (default: PLEX_USERNAME)")
    parser.add_argument("--password", default=PLEX_PASSWORD, help="plex.tv password (default: PLEX_PASSWORD)")
    parser.add_argument(
        "--log-level",
        choices=list(LOG_LEVELS),
        default=DEFAULT_LOG_LEVEL,
        help="Logging level (default: INFO)",
    )
    parser.set_defaults(page_size=DEFAULT_PAGE_SIZE)

    # Options shared by every subcommand
    output_parser = argparse.ArgumentParser(add_help=False)
    output_parser.add_argument("--output", help="Write JSON results to this file instead of stdout")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("identity", parents=[output_parser], help="Show the server identity")
    subparsers.add_parser("sections", parents=[output_parser], help="List library sections")

    items_parser = subparsers.add_parser("items", parents=[output_parser], help="List all items in a library section")
    items_parser.add_argument("section", help="Library section key")
    items_parser.add_argument(
        "--page-size",
        type=int,
        default=DEFAULT_PAGE_SIZE,
        help=f"Items requested per page (default: {DEFAULT_PAGE_SIZE})",
    )

    search_parser = subparsers.add_parser("search", parents=[output_parser], help="Search all libraries by title")
    search_parser.add_argument("query", help="Title to search for")

    refresh_parser = subparsers.add_parser("refresh", parents=[output_parser], help="Scan a library section")
    refresh_parser.add_argument("section", help="Library section key")
    refresh_parser.add_argument("--path", help="Limit the scan to this folder")

    subparsers.add_parser("token", parents=[output_parser], help="Refresh the Plex token from plex.tv credentials")

    return parser


def main(argv: Optional[list] = None) -> int:
    """Main entry point for the CLI."""
    args = build_parser().parse_args(argv)

    try:
        query = PlexQuery(
            server_url=args.server,
            username=args.username,
            password=args.password,
            token=args.token,
            page_size=args.page_size,
            log_level=args.log_level,
            output=args.output,
        )
        query.run(args.command, args)
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return 1
    except (PlexToolsError, FileOperationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
