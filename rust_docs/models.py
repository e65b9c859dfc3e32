#!/usr/bin/env python3
"""Pydantic models for the results returned by the scraping layer."""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from .config import DEFAULT_PAGE, DEFAULT_PER_PAGE

RustTypeKind = Literal["struct", "enum", "trait", "function", "macro", "type", "module", "other"]


class CrateInfo(BaseModel):
    """One crates.io search hit."""

    name: str = Field(description="Crate name")
    version: str = Field(description="Newest version, or 'unknown'")
    description: Optional[str] = Field(default=None, description="Crate description")


class CrateSearchResult(BaseModel):
    """One page of crate search results."""

    crates: List[CrateInfo] = Field(default_factory=list, description="Crates on this page")
    total_count: int = Field(description="Total number of matching crates upstream")


class CrateVersion(BaseModel):
    """One published crate version."""

    version: str = Field(description="Version string")
    is_yanked: bool = Field(default=False, description="Whether the version was yanked")
    release_date: Optional[str] = Field(default=None, description="Release timestamp")


class CrateDetails(BaseModel):
    """Crate metadata merged with the full version list."""

    name: str
    description: Optional[str] = None
    downloads: int = Field(default=0, ge=0, description="All-time download count")
    homepage: Optional[str] = None
    repository: Optional[str] = None
    documentation: Optional[str] = None
    versions: List[CrateVersion] = Field(default_factory=list)


class FeatureFlag(BaseModel):
    """One cargo feature of a crate."""

    name: str = Field(min_length=1, description="Feature name")
    description: Optional[str] = Field(default=None, description="What the feature enables")
    enabled: bool = Field(default=False, description="Whether the feature is on by default")


class RustType(BaseModel):
    """A documented item on docs.rs."""

    name: str
    kind: RustTypeKind = "other"
    path: str
    description: Optional[str] = None
    source_url: Optional[str] = None
    documentation_url: str


class SymbolDefinition(BaseModel):
    """One symbol search hit from a crate's all-items index."""

    name: str = Field(description="Last path segment of the symbol")
    kind: str = Field(description="Item kind, e.g. 'struct' or 'macro'")
    path: str = Field(description="Fully qualified path, e.g. 'tokio::runtime::Runtime'")
    documentation_url: Optional[str] = None
    source_code: Optional[str] = None
    documentation_html: Optional[str] = None


class SearchOptions(BaseModel):
    """Arguments for a crate search."""

    query: str
    page: Optional[int] = Field(default=None, description=f"Page number, defaults to {DEFAULT_PAGE}")
    per_page: Optional[int] = Field(default=None, description=f"Results per page, defaults to {DEFAULT_PER_PAGE}")
