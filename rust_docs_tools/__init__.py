"""
MCP tools for the Rust documentation bridge.

This package contains MCP tool wrappers organized by upstream:
- crate_tools: crates.io search, crate details and version listing
- docs_tools: docs.rs documentation, types, features, source and symbols
"""
