"""
Core modules for the Rust documentation MCP bridge.

This package contains the core business logic modules:
- config: Upstream origins, headers and logging settings
- logger: Logging infrastructure
- errors: Exception hierarchy shared by every layer
- models: Result schema returned to MCP clients
- http_client: Per-origin HTTP adapters for docs.rs and crates.io
- extraction: CSS selector fallback chains and HTML to markdown conversion
- scraper: Scraping and normalization of docs.rs and crates.io responses
- core: Main business logic functions used by the MCP tools
"""

__version__ = "1.0.0"
