#!/usr/bin/env python3
"""
Configuration for the Rust documentation bridge.

Upstream origins and request settings are fixed. Only log verbosity and the
log file location can be changed from the environment.
"""

import os
from pathlib import Path
from typing import Optional

from . import __version__

# Upstream origins
DOCS_RS_BASE_URL = "https://docs.rs"
CRATES_IO_BASE_URL = "https://crates.io/api/v1/"

USER_AGENT = f"rust-docs-bridge/{__version__}"

DOCS_RS_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/json",
    "User-Agent": USER_AGENT,
}
CRATES_IO_HEADERS = {
    "Accept": "application/json",
    "User-Agent": USER_AGENT,
}

# Seconds before a request is aborted
REQUEST_TIMEOUT = 10

# Request defaults
DEFAULT_VERSION = "latest"
DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 10
MAX_PER_PAGE = 100

# Logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()


def get_logs_dir() -> Optional[Path]:
    """Directory for rotating log files, or None to log to stderr only."""
    value = os.environ.get("RUST_DOCS_LOG_DIR")
    return Path(value).expanduser() if value else None
