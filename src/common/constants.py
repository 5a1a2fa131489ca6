"""
Constants and configuration settings for the Plex tools.

This module contains the constants used when talking to a Plex Media Server.
It includes connection defaults read from the environment, the client identity
headers sent with every request, wire format headers, pagination settings and
logging configuration.
"""

import os
import platform

from dotenv import load_dotenv

load_dotenv()

# Plex server configuration
PLEX_URL = os.getenv("PLEX_URL", "http://localhost:32400")
PLEX_TOKEN = os.getenv("PLEX_TOKEN")
PLEX_USERNAME = os.getenv("PLEX_USERNAME")
PLEX_PASSWORD = os.getenv("PLEX_PASSWORD")
PLEX_SIGN_IN_URL = "https://plex.tv/users/sign_in.json"

# Client identity sent as X-Plex-* headers
PLEX_PRODUCT = "Plex Tools"
PLEX_VERSION = "1.0.0"
PLEX_PLATFORM = "Python"
PLEX_PLATFORM_VERSION = platform.python_version()
PLEX_DEVICE = platform.system() or "Unknown"
PLEX_DEVICE_NAME = os.getenv("PLEX_DEVICE_NAME", "Plex Tools")
PLEX_CLIENT_IDENTIFIER = os.getenv("PLEX_CLIENT_IDENTIFIER", "plex-tools-python")

# Request settings
DEFAULT_TIMEOUT = 30  # seconds
REQUEST_WORKERS = 4
MAX_SERIALIZATION_DEPTH = 10

# Pagination settings
DEFAULT_PAGE_SIZE = 100
PAGE_START_PARAM = "X-Plex-Container-Start"
PAGE_SIZE_PARAM = "X-Plex-Container-Size"

# Wire format names
FORMAT_JSON = "Json"
FORMAT_XML = "Xml"
FORMAT_RAW = "Raw"

ACCEPT_HEADERS = {
    FORMAT_JSON: "application/json",
    FORMAT_XML: "application/xml, text/xml",
    FORMAT_RAW: "text/plain",
}

CONTENT_TYPE_HEADERS = {
    FORMAT_JSON: "application/json",
    FORMAT_XML: "application/xml",
    FORMAT_RAW: "text/plain",
}

# Logging configuration
LOG_LEVELS = {"DEBUG": 10, "INFO": 20, "WARN": 30, "WARNING": 30, "ERROR": 40}
DEFAULT_LOG_LEVEL = "INFO"
LOG_DIR = "./.logs"
