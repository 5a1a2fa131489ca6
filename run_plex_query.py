#!/usr/bin/env python3
"""
Wrapper script for the Plex query tool.
"""

import subprocess
import sys

# Run module from src directory
result = subprocess.run([sys.executable, "src/plex_query.py"] + sys.argv[1:])

sys.exit(result.returncode)
