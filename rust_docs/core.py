#!/usr/bin/env python3
"""
Core business logic for the Rust documentation MCP bridge.

This module contains the implementation functions behind every MCP tool.
They have no tool-registration code, take the scraper as an argument and
return JSON-ready payloads, which keeps them reusable and testable. Progress
and failures are reported to the optional FastMCP context; errors are logged
by the scraper and re-raised here for the tool shell to turn into tool errors.
"""

from typing import Any, Dict, List, Optional

from fastmcp import Context

from .errors import RustDocsError
from .models import SearchOptions
from .scraper import DocsRsScraper


async def _report_failure(ctx: Optional[Context], message: str, error: RustDocsError) -> None:
    if ctx:
        await ctx.error(f"{message}: {error}")


async def search_crates_impl(
    query: str,
    scraper: DocsRsScraper,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
    ctx: Optional[Context] = None,
) -> Dict[str, Any]:
    """
    Core implementation for searching crates on crates.io.

    Args:
        query: Search text
        scraper: Scraper holding the docs.rs and crates.io clients
        page: Page number, starting at 1
        per_page: Results per page
        ctx: Optional FastMCP context for user feedback

    Returns:
        Dictionary with the 'crates' on this page and the upstream 'total_count'
    """
    if ctx:
        await ctx.info(f"Searching crates.io for '{query}'")
    try:
        result = await scraper.search_crates(SearchOptions(query=query, page=page, per_page=per_page))
    except RustDocsError as e:
        await _report_failure(ctx, "Error searching for crates", e)
        raise

    if ctx:
        await ctx.info(f"Found {len(result.crates)} of {result.total_count} crates")
    return result.model_dump()


async def get_crate_details_impl(crate_name: str, scraper: DocsRsScraper, ctx: Optional[Context] = None) -> Dict[str, Any]:
    """
    Core implementation for crate metadata and versions from crates.io.

    Returns:
        Dictionary with name, description, downloads, links and versions
    """
    if ctx:
        await ctx.info(f"Getting crate details for {crate_name}")
    try:
        details = await scraper.get_crate_details(crate_name)
    except RustDocsError as e:
        await _report_failure(ctx, "Error getting crate details", e)
        raise
    return details.model_dump()


async def get_crate_documentation_impl(
    crate_name: str,
    scraper: DocsRsScraper,
    version: Optional[str] = None,
    ctx: Optional[Context] = None,
) -> str:
    """
    Core implementation for fetching a crate's docs.rs page as markdown.

    Args:
        crate_name: Name of the crate
        scraper: Scraper holding the docs.rs and crates.io clients
        version: Version of the crate, latest when omitted
        ctx: Optional FastMCP context for user feedback

    Returns:
        Markdown text of the main documentation content
    """
    if ctx:
        await ctx.info(f"Fetching documentation for {crate_name} {version or 'latest'}")
    try:
        return await scraper.get_crate_documentation(crate_name, version)
    except RustDocsError as e:
        await _report_failure(ctx, "Error getting documentation", e)
        raise


async def get_type_info_impl(
    crate_name: str,
    path: str,
    scraper: DocsRsScraper,
    version: Optional[str] = None,
    ctx: Optional[Context] = None,
) -> Dict[str, Any]:
    """Core implementation for describing one documented item."""
    if ctx:
        await ctx.info(f"Getting type info for {path} in {crate_name}")
    try:
        type_info = await scraper.get_type_info(crate_name, path, version)
    except RustDocsError as e:
        await _report_failure(ctx, "Error getting type information", e)
        raise
    return type_info.model_dump()


async def get_feature_flags_impl(
    crate_name: str,
    scraper: DocsRsScraper,
    version: Optional[str] = None,
    ctx: Optional[Context] = None,
) -> List[Dict[str, Any]]:
    """Core implementation for listing a crate's cargo features."""
    if ctx:
        await ctx.info(f"Getting feature flags for {crate_name}")
    try:
        features = await scraper.get_feature_flags(crate_name, version)
    except RustDocsError as e:
        await _report_failure(ctx, "Error getting feature flags", e)
        raise

    if ctx:
        await ctx.info(f"Found {len(features)} feature flags")
    return [feature.model_dump() for feature in features]


async def get_crate_versions_impl(crate_name: str, scraper: DocsRsScraper, ctx: Optional[Context] = None) -> List[Dict[str, Any]]:
    """Core implementation for listing the published versions of a crate."""
    if ctx:
        await ctx.info(f"Getting versions for {crate_name}")
    try:
        versions = await scraper.get_crate_versions(crate_name)
    except RustDocsError as e:
        await _report_failure(ctx, "Error getting crate versions", e)
        raise
    return [version.model_dump() for version in versions]


async def get_source_code_impl(
    crate_name: str,
    path: str,
    scraper: DocsRsScraper,
    version: Optional[str] = None,
    ctx: Optional[Context] = None,
) -> str:
    """Core implementation for fetching a source file from docs.rs."""
    if ctx:
        await ctx.info(f"Getting source code for {path} in {crate_name}")
    try:
        return await scraper.get_source_code(crate_name, path, version)
    except RustDocsError as e:
        await _report_failure(ctx, "Error getting source code", e)
        raise


async def search_symbols_impl(
    crate_name: str,
    query: str,
    scraper: DocsRsScraper,
    version: Optional[str] = None,
    ctx: Optional[Context] = None,
) -> List[Dict[str, Any]]:
    """
    Core implementation for searching a crate's symbols.

    Returns:
        List of symbol dictionaries; empty when nothing matches or the crate
        has no symbol index
    """
    if ctx:
        await ctx.info(f"Searching symbols in {crate_name} for '{query}'")
    try:
        symbols = await scraper.search_symbols(crate_name, query, version)
    except RustDocsError as e:
        await _report_failure(ctx, "Error searching for symbols", e)
        raise

    if ctx:
        await ctx.info(f"Found {len(symbols)} matching symbols")
    return [symbol.model_dump() for symbol in symbols]
