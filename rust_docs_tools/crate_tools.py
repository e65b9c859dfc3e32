#!/usr/bin/env python3
"""
MCP tools for crates.io registry lookups.

This module provides MCP tool wrappers around the core registry functionality.
"""

from typing import Annotated, Any, Dict, List, Optional

from fastmcp import Context, FastMCP
from fastmcp.exceptions import ToolError
from pydantic import Field

from rust_docs.config import DEFAULT_PER_PAGE, MAX_PER_PAGE
from rust_docs.core import get_crate_details_impl, get_crate_versions_impl, search_crates_impl
from rust_docs.errors import RustDocsError
from rust_docs.logger import get_logger
from rust_docs.scraper import DocsRsScraper

logger = get_logger("tools.crates")

CrateName = Annotated[str, Field(min_length=1, description="Name of the crate")]


def register_crate_tools(mcp: FastMCP, scraper: Optional[DocsRsScraper] = None):
    """Register crates.io related MCP tools."""
    scraper = scraper or DocsRsScraper()

    @mcp.tool
    async def search_crates(
        query: Annotated[str, Field(min_length=1, description="Search query for crates")],
        ctx: Context,
        page: Annotated[Optional[int], Field(ge=1, description="Page number (starts at 1)")] = None,
        per_page: Annotated[
            Optional[int], Field(ge=1, le=MAX_PER_PAGE, description=f"Results per page (default {DEFAULT_PER_PAGE})")
        ] = None,
    ) -> Dict[str, Any]:
        """
        Search crates.io for crates matching a query.

        Returns:
            Dictionary with the matching 'crates' (name, version, description)
            and the upstream 'total_count'
        """
        try:
            return await search_crates_impl(query, scraper, page, per_page, ctx)
        except RustDocsError as e:
            logger.error("Error in search_crates tool", extra={'extra_data': {'query': query}})
            raise ToolError(f"Error searching for crates: {e}") from e

    @mcp.tool
    async def get_crate_details(crate_name: CrateName, ctx: Context) -> Dict[str, Any]:
        """
        Get crate metadata from crates.io together with every published version.

        Returns:
            Dictionary with name, description, downloads, homepage, repository,
            documentation link and versions
        """
        try:
            return await get_crate_details_impl(crate_name, scraper, ctx)
        except RustDocsError as e:
            logger.error("Error in get_crate_details tool", extra={'extra_data': {'crate': crate_name}})
            raise ToolError(f"Error getting crate details: {e}") from e

    @mcp.tool
    async def get_crate_versions(crate_name: CrateName, ctx: Context) -> List[Dict[str, Any]]:
        """
        List the published versions of a crate.

        Returns:
            List of versions with yanked flag and release date where known
        """
        try:
            return await get_crate_versions_impl(crate_name, scraper, ctx)
        except RustDocsError as e:
            logger.error("Error in get_crate_versions tool", extra={'extra_data': {'crate': crate_name}})
            raise ToolError(f"Error getting crate versions: {e}") from e
