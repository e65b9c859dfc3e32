#!/usr/bin/env python3
"""
MCP tools for docs.rs documentation lookups.

This module provides MCP tool wrappers around the core documentation functionality.
"""

from typing import Annotated, Any, Dict, List, Optional

from fastmcp import Context, FastMCP
from fastmcp.exceptions import ToolError
from pydantic import Field

from rust_docs.core import (
    get_crate_documentation_impl,
    get_feature_flags_impl,
    get_source_code_impl,
    get_type_info_impl,
    search_symbols_impl,
)
from rust_docs.errors import RustDocsError
from rust_docs.logger import get_logger
from rust_docs.scraper import DocsRsScraper

logger = get_logger("tools.docs")

CrateName = Annotated[str, Field(min_length=1, description="Name of the crate")]
Version = Annotated[Optional[str], Field(description="Specific version (defaults to latest)")]


def register_docs_tools(mcp: FastMCP, scraper: Optional[DocsRsScraper] = None):
    """Register docs.rs related MCP tools."""
    scraper = scraper or DocsRsScraper()

    @mcp.tool
    async def get_crate_documentation(crate_name: CrateName, ctx: Context, version: Version = None) -> str:
        """
        Fetch the docs.rs page of a crate as markdown.

        Returns:
            Markdown text of the main documentation content
        """
        try:
            return await get_crate_documentation_impl(crate_name, scraper, version, ctx)
        except RustDocsError as e:
            logger.error("Error in get_crate_documentation tool", extra={'extra_data': {'crate': crate_name}})
            raise ToolError(f"Error getting documentation: {e}") from e

    @mcp.tool
    async def get_type_info(
        crate_name: CrateName,
        path: Annotated[str, Field(min_length=1, description='Path to the item (e.g., "runtime/struct.Runtime.html")')],
        ctx: Context,
        version: Version = None,
    ) -> Dict[str, Any]:
        """
        Describe a documented item: its kind, description and links.

        Returns:
            Dictionary with name, kind, path, description, source_url and
            documentation_url
        """
        try:
            return await get_type_info_impl(crate_name, path, scraper, version, ctx)
        except RustDocsError as e:
            logger.error("Error in get_type_info tool", extra={'extra_data': {'crate': crate_name, 'path': path}})
            raise ToolError(f"Error getting type information: {e}") from e

    @mcp.tool
    async def get_feature_flags(crate_name: CrateName, ctx: Context, version: Version = None) -> List[Dict[str, Any]]:
        """
        List the cargo feature flags of a crate.

        Returns:
            List of features with description and whether they are on by default
        """
        try:
            return await get_feature_flags_impl(crate_name, scraper, version, ctx)
        except RustDocsError as e:
            logger.error("Error in get_feature_flags tool", extra={'extra_data': {'crate': crate_name}})
            raise ToolError(f"Error getting feature flags: {e}") from e

    @mcp.tool
    async def get_source_code(
        crate_name: CrateName,
        path: Annotated[str, Field(min_length=1, description='Path to the source file (e.g., "runtime/mod.rs")')],
        ctx: Context,
        version: Version = None,
    ) -> str:
        """
        Fetch a source file of a crate from docs.rs.

        Returns:
            The source code as plain text
        """
        try:
            return await get_source_code_impl(crate_name, path, scraper, version, ctx)
        except RustDocsError as e:
            logger.error("Error in get_source_code tool", extra={'extra_data': {'crate': crate_name, 'path': path}})
            raise ToolError(f"Error getting source code: {e}") from e

    @mcp.tool
    async def search_symbols(
        crate_name: CrateName,
        query: Annotated[str, Field(min_length=1, description="Search query for symbols")],
        ctx: Context,
        version: Version = None,
    ) -> List[Dict[str, Any]]:
        """
        Search the symbols of a crate by name, case-insensitively.

        Returns:
            List of matching symbols with kind, fully qualified path and
            documentation URL
        """
        try:
            return await search_symbols_impl(crate_name, query, scraper, version, ctx)
        except RustDocsError as e:
            logger.error("Error in search_symbols tool", extra={'extra_data': {'crate': crate_name, 'query': query}})
            raise ToolError(f"Error searching for symbols: {e}") from e
