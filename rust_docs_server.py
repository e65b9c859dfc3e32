#!/usr/bin/env python3
"""
FastMCP server bridging MCP clients to crates.io and docs.rs.

This server provides tools to:
1. Search crates.io and read crate details and version lists
2. Fetch crate documentation from docs.rs as markdown
3. Inspect documented items, feature flags and source files
4. Search the symbols of a crate

Usage:
    python rust_docs_server.py [stdio|sse|http]
"""

import sys
from typing import List, Optional

from fastmcp import FastMCP

from rust_docs.logger import setup_logging
from rust_docs.scraper import DocsRsScraper
from rust_docs_tools.crate_tools import register_crate_tools
from rust_docs_tools.docs_tools import register_docs_tools

HOST = "127.0.0.1"
PORT = 8604


def create_server(scraper: Optional[DocsRsScraper] = None) -> FastMCP:
    """Build the MCP server with every tool registered against one scraper."""
    scraper = scraper or DocsRsScraper()
    mcp = FastMCP("Rust Docs Bridge 🦀")
    register_crate_tools(mcp, scraper)
    register_docs_tools(mcp, scraper)
    return mcp


# Setup logging
logger = setup_logging()

mcp = create_server()


def main(argv: Optional[List[str]] = None) -> None:
    args = sys.argv[1:] if argv is None else argv
    logger.info("Rust Docs Bridge starting up")

    transport = args[0].lower() if args else "stdio"

    if transport == "sse":
        logger.info(f"Running with SSE transport on http://{HOST}:{PORT}")
        mcp.run(transport="sse", host=HOST, port=PORT)
    elif transport == "http":
        logger.info(f"Running with HTTP transport on http://{HOST}:{PORT}/mcp")
        mcp.run(transport="http", host=HOST, port=PORT, path="/mcp")
    elif transport == "stdio":
        logger.info("Running with STDIO transport")
        mcp.run(transport="stdio")
    else:
        # stdout belongs to the stdio transport
        print("Usage: python rust_docs_server.py [stdio|sse|http]", file=sys.stderr)
        print("Default: stdio", file=sys.stderr)
        logger.info("Running with default STDIO transport")
        mcp.run()


if __name__ == "__main__":
    main()
