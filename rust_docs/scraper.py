#!/usr/bin/env python3
"""
Scraping and normalization of docs.rs pages and crates.io API responses.

Every public coroutine on DocsRsScraper follows the same shape: validate the
arguments, make the request, check that the response is JSON or HTML as
expected, then map it into the models in rust_docs.models. Parsing lives in
module-level functions that take an HTML string, so they can be checked
against saved pages without any network access.
"""

import re
from typing import List, Optional, Tuple
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from .config import DEFAULT_PAGE, DEFAULT_PER_PAGE, DEFAULT_VERSION, DOCS_RS_BASE_URL, MAX_PER_PAGE
from .errors import (
    HttpClientError,
    ResponseShapeError,
    ScraperError,
    SourceNotFoundError,
    UpstreamHTTPError,
    ValidationError,
)
from .extraction import (
    NOT_FOUND,
    extract_markdown,
    find_first,
    first_match,
    html_to_markdown,
    parse_html,
    select_all,
)
from .http_client import HttpClient, HttpResponse, create_crates_io_client, create_docs_rs_client
from .logger import get_logger
from .models import (
    CrateDetails,
    CrateInfo,
    CrateSearchResult,
    CrateVersion,
    FeatureFlag,
    RustType,
    SearchOptions,
    SymbolDefinition,
)

logger = get_logger("scraper")

SOURCE_NOT_FOUND = "Source code not found"

# Main content of a docs.rs crate page, newest markup first
DOCUMENTATION_SELECTORS = [
    "#main-content",
    "#main",
    "main",
    ".container.package-page-container",
    ".rustdoc",
    ".information",
    ".crate-info",
    "div.content",
]

# Headings on rustdoc item pages, searched before the whole page
KIND_SCOPES = [".main-heading h1", "h1.fqn", "h1"]
KIND_MARKERS = [
    ("struct", ".struct"),
    ("enum", ".enum"),
    ("trait", ".trait"),
    ("function", ".fn"),
    ("macro", ".macro"),
    ("type", ".type, .typedef"),
    ("module", ".mod"),
]
ITEM_PREFIXES = {
    "struct", "enum", "trait", "fn", "macro", "type", "mod", "union", "constant",
    "static", "attr", "derive", "primitive", "keyword", "traitalias",
}

SOURCE_LINK_SELECTORS = [".src-link a", "a.src", "a.srclink"]

FEATURE_CONTAINER_SELECTORS = ["#main", ".package-details", "main"]
DEFAULT_MARKER = re.compile(r"\(\s*(?:enabled\s+)?(?:by\s+)?default\s*\)", re.IGNORECASE)

VERSION_LIST_SELECTORS = [".versions li", "#releases-list li"]

SOURCE_BLOCK_SELECTORS = ["pre.rust", "pre.src", ".src pre", "#source-code pre", "pre", "code"]
LINE_NUMBER_SELECTORS = ".src-line-numbers, .line-numbers, [data-nosnippet]"

# all.html section heading id -> symbol kind
SYMBOL_SECTIONS = [
    ("structs", "struct"),
    ("enums", "enum"),
    ("unions", "union"),
    ("traits", "trait"),
    ("functions", "function"),
    ("macros", "macro"),
    ("derives", "derive"),
    ("attributes", "attribute"),
    ("modules", "module"),
    ("types", "type"),
    ("typedefs", "type"),
    ("constants", "constant"),
    ("statics", "static"),
]

CRATE_NAME_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*$")
VERSION_PATTERN = re.compile(r"^[A-Za-z0-9.+*^~=<>,_-]+$")


def _require(value: Optional[str], field: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} must not be empty")
    return str(value).strip()


def _validate_crate_name(crate_name: Optional[str]) -> str:
    name = _require(crate_name, "crate_name")
    if not CRATE_NAME_PATTERN.match(name):
        raise ValidationError(f"Invalid crate name: {name!r}")
    return name


def _version_path(version: Optional[str]) -> str:
    if version is None or not version.strip():
        return DEFAULT_VERSION
    version = version.strip()
    if not VERSION_PATTERN.match(version) or ".." in version or not version.strip("."):
        raise ValidationError(f"Invalid version: {version!r}")
    return version


def _item_path(path: Optional[str]) -> str:
    cleaned = _require(path, "path").lstrip("/")
    if not cleaned or ".." in cleaned.split("/"):
        raise ValidationError(f"Invalid path: {path!r}")
    return cleaned


def crate_ident(crate_name: str) -> str:
    """Rust identifier for a crate: dashes become underscores."""
    return crate_name.replace("-", "_")


def _expect_json(response: HttpResponse) -> dict:
    if not response.is_json:
        raise ResponseShapeError("JSON", "text")
    if not isinstance(response.data, dict):
        raise ResponseShapeError("JSON object", type(response.data).__name__)
    return response.data


def _expect_html(response: HttpResponse) -> str:
    if response.is_json:
        raise ResponseShapeError("HTML", "JSON")
    return response.data


def _clean(value) -> Optional[str]:
    if value is None:
        return None
    text = " ".join(str(value).split())
    return text or None


def _non_negative_int(value) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number >= 0 else None


# ---------------------------------------------------------------------------
# crates.io JSON
# ---------------------------------------------------------------------------

def _crate_info(raw) -> Optional[CrateInfo]:
    if not isinstance(raw, dict) or not _clean(raw.get("name")):
        return None
    return CrateInfo(
        name=_clean(raw["name"]),
        version=_clean(raw.get("max_version")) or _clean(raw.get("newest_version")) or "unknown",
        description=_clean(raw.get("description")),
    )


def parse_search_results(data: dict, per_page: int = DEFAULT_PER_PAGE) -> CrateSearchResult:
    """Map a crates.io search body; total_count never drops below the parsed count."""
    crates = [info for info in map(_crate_info, data.get("crates") or []) if info][:per_page]
    total = _non_negative_int((data.get("meta") or {}).get("total"))
    total_count = len(crates) if total is None else max(total, len(crates))
    return CrateSearchResult(crates=crates, total_count=total_count)


def parse_registry_versions(data: dict) -> List[CrateVersion]:
    versions = []
    for raw in data.get("versions") or []:
        if not isinstance(raw, dict):
            continue
        number = _clean(raw.get("num"))
        if not number:
            continue
        versions.append(CrateVersion(
            version=number,
            is_yanked=bool(raw.get("yanked", False)),
            release_date=_clean(raw.get("created_at")),
        ))
    return versions


def parse_crate_details(data: dict, crate_name: str) -> CrateDetails:
    crate = data.get("crate")
    if not isinstance(crate, dict):
        raise ResponseShapeError("crate metadata", "a body without a 'crate' object")
    return CrateDetails(
        name=_clean(crate.get("name")) or crate_name,
        description=_clean(crate.get("description")),
        downloads=_non_negative_int(crate.get("downloads")) or 0,
        homepage=_clean(crate.get("homepage")),
        repository=_clean(crate.get("repository")),
        documentation=_clean(crate.get("documentation")),
        versions=parse_registry_versions(data),
    )


# ---------------------------------------------------------------------------
# docs.rs HTML
# ---------------------------------------------------------------------------

def extract_documentation(html: str) -> str:
    """Readable text for a crate page; the whole page is used when no selector matches."""
    soup = parse_html(html)
    markdown = extract_markdown(soup, DOCUMENTATION_SELECTORS, default="")
    if markdown:
        return markdown
    logger.info("No documentation selector matched, converting the whole page")
    return html_to_markdown(soup.body or soup) or NOT_FOUND


def classify_kind(soup: BeautifulSoup) -> str:
    """Item kind from marker classes, checked in fixed priority order."""
    scopes = [soup.select_one(selector) for selector in KIND_SCOPES]
    for scope in [scope for scope in scopes if scope is not None] + [soup]:
        for kind, marker in KIND_MARKERS:
            if scope.select_one(marker) is not None:
                return kind
    return "other"


def display_name(path: str) -> str:
    """'runtime/struct.Runtime.html' -> 'Runtime', 'runtime/index.html' -> 'runtime'."""
    segments = [segment for segment in path.strip("/").split("/") if segment]
    if not segments:
        return path
    segment = segments[-1]
    if segment == "index.html" and len(segments) > 1:
        segment = segments[-2]
    if segment.endswith(".html"):
        segment = segment[:-len(".html")]
    prefix, _, rest = segment.partition(".")
    if rest and prefix in ITEM_PREFIXES:
        segment = rest
    return segment or path


def parse_type_page(html: str, path: str, documentation_url: str) -> RustType:
    soup = parse_html(html)
    source_link = find_first(soup, SOURCE_LINK_SELECTORS)
    href = source_link.get("href") if source_link is not None else None
    return RustType(
        name=display_name(path),
        kind=classify_kind(soup),
        path=path,
        description=extract_markdown(soup, [".docblock"], default="") or None,
        source_url=urljoin(documentation_url, href) if href else None,
        documentation_url=documentation_url,
    )


def _legacy_feature_blocks(root: Tag) -> Optional[List[FeatureFlag]]:
    flags = []
    for block in root.select(".feature"):
        name_element = block.select_one(".feature-name")
        name = _clean(name_element.get_text()) if name_element else None
        if not name or name.lower() == "default":
            continue
        description_element = block.select_one(".feature-description")
        flags.append(FeatureFlag(
            name=name,
            description=_clean(description_element.get_text()) if description_element else None,
            enabled="feature-enabled" in (block.get("class") or []),
        ))
    return flags or None


def _feature_name(heading: Tag) -> Optional[str]:
    text = DEFAULT_MARKER.sub("", heading.get_text(" "))
    text = " ".join(text.replace("§", " ").split()).strip("# ")
    return text or _clean(heading.get("id"))


def _feature_description(sibling: Optional[Tag]) -> Optional[str]:
    if sibling is None or sibling.name in ("h1", "h2", "h3", "h4"):
        return None
    if sibling.name in ("ul", "ol"):
        enabled = [_clean(li.get_text()) for li in sibling.find_all("li")]
        enabled = [name for name in enabled if name]
        return f"Enables: {', '.join(enabled)}" if enabled else None
    return _clean(sibling.get_text())


def _marks_default(heading: Tag, sibling: Optional[Tag]) -> bool:
    if DEFAULT_MARKER.search(heading.get_text(" ")):
        return True
    if sibling is None:
        return False
    return any("default" in name.lower() for name in sibling.get("class") or [])


def _feature_headings(root: Tag) -> Optional[List[FeatureFlag]]:
    container = find_first(root, FEATURE_CONTAINER_SELECTORS) or root
    headings = first_match(container, [select_all("h3"), select_all("h2")]) or []
    flags = []
    for heading in headings:
        name = _feature_name(heading)
        if not name or name.lower() == "default":
            continue
        sibling = heading.find_next_sibling()
        flags.append(FeatureFlag(
            name=name,
            description=_feature_description(sibling),
            enabled=_marks_default(heading, sibling),
        ))
    return flags or None


def parse_feature_flags(html: str) -> List[FeatureFlag]:
    """One record per feature; the aggregate 'default' section is skipped."""
    soup = parse_html(html)
    return first_match(soup, [_legacy_feature_blocks, _feature_headings]) or []


def parse_version_listing(html: str, crate_name: str) -> List[CrateVersion]:
    """Versions from a docs.rs crate page: the release list, else an anchor scan."""
    soup = parse_html(html)
    versions: List[CrateVersion] = []
    seen = set()

    for item in first_match(soup, [select_all(selector) for selector in VERSION_LIST_SELECTORS]) or []:
        link = item.find("a")
        version = _clean((link or item).get_text())
        if not version or version == "latest" or version in seen:
            continue
        seen.add(version)
        classes = list(item.get("class") or []) + list((link.get("class") if link else None) or [])
        versions.append(CrateVersion(version=version, is_yanked="yanked" in classes))

    if versions:
        return versions

    pattern = re.compile(rf"/crate/{re.escape(crate_name)}/([^/?#]+)")
    for anchor in soup.select(f'a[href*="/crate/{crate_name}/"]'):
        match = pattern.search(anchor.get("href", ""))
        if not match:
            continue
        version = match.group(1)
        if version == "latest" or version in seen:
            continue
        seen.add(version)
        versions.append(CrateVersion(version=version, is_yanked=False))
    return versions


def source_candidates(crate_name: str, version: str, path: str) -> List[str]:
    """docs.rs source paths to try, in order."""
    page = path if path.endswith(".html") else f"{path}.html"
    raw = path[:-len(".html")] if path.endswith(".html") else path
    return [
        f"{crate_name}/{version}/src/{crate_ident(crate_name)}/{page}",
        f"crate/{crate_name}/{version}/source/{raw}",
        f"{crate_name}/{version}/src/{page}",
    ]


def extract_source(html: str) -> str:
    soup = parse_html(html)
    for chrome in soup.select(LINE_NUMBER_SELECTORS):
        chrome.decompose()
    block = find_first(soup, SOURCE_BLOCK_SELECTORS)
    if block is None:
        return SOURCE_NOT_FOUND
    return block.get_text().strip("\n")


def parse_symbol_index(html: str, query: str, ident: str, index_url: str) -> List[SymbolDefinition]:
    """Case-insensitive substring search over the sections of a rustdoc all.html page."""
    soup = parse_html(html)
    needle = query.lower()
    symbols = []
    for section_id, kind in SYMBOL_SECTIONS:
        heading = soup.find(id=section_id)
        if heading is None:
            continue
        listing = heading.find_next_sibling()
        if listing is None or listing.name not in ("ul", "ol", "div"):
            continue
        for anchor in listing.select("a[href]"):
            text = "".join(anchor.get_text().split())
            if not text:
                continue
            qualified = text if text.startswith(f"{ident}::") else f"{ident}::{text}"
            name = qualified.split("::")[-1]
            if needle not in name.lower() and needle not in qualified.lower():
                continue
            symbols.append(SymbolDefinition(
                name=name,
                kind=kind,
                path=qualified,
                documentation_url=urljoin(index_url, anchor["href"]),
            ))
    return symbols


class DocsRsScraper:
    """Scraper for crates.io metadata and docs.rs documentation pages."""

    def __init__(self, docs_client: Optional[HttpClient] = None, crates_client: Optional[HttpClient] = None):
        self.docs_client = docs_client or create_docs_rs_client()
        self.crates_client = crates_client or create_crates_io_client()

    async def search_crates(self, options: SearchOptions) -> CrateSearchResult:
        """Search crates.io; total_count is the registry's reported total."""
        query = _require(options.query, "query")
        page = DEFAULT_PAGE if options.page is None else options.page
        per_page = DEFAULT_PER_PAGE if options.per_page is None else options.per_page
        if page < 1:
            raise ValidationError("page must be at least 1")
        if not 1 <= per_page <= MAX_PER_PAGE:
            raise ValidationError(f"per_page must be between 1 and {MAX_PER_PAGE}")

        logger.info("Searching for crates", extra={'extra_data': {'query': query, 'page': page, 'per_page': per_page}})
        try:
            response = await self.crates_client.get(
                "crates", params={"q": query, "page": page, "per_page": per_page}
            )
            return parse_search_results(_expect_json(response), per_page)
        except Exception as e:
            logger.error("Error searching for crates", exc_info=True, extra={'extra_data': {'query': query}})
            raise ScraperError("search_crates", f"Failed to search for crates: {e}") from e

    async def get_crate_details(self, crate_name: str) -> CrateDetails:
        name = _validate_crate_name(crate_name)
        logger.info("Getting crate details", extra={'extra_data': {'crate': name}})
        try:
            response = await self.crates_client.get(f"crates/{name}")
            return parse_crate_details(_expect_json(response), name)
        except Exception as e:
            logger.error("Error getting crate details", exc_info=True, extra={'extra_data': {'crate': name}})
            raise ScraperError("get_crate_details", f"Failed to get crate details for {name}: {e}") from e

    async def get_crate_documentation(self, crate_name: str, version: Optional[str] = None) -> str:
        name = _validate_crate_name(crate_name)
        version_path = _version_path(version)
        logger.info("Getting crate documentation", extra={'extra_data': {'crate': name, 'version': version_path}})
        try:
            response = await self.docs_client.get(f"crate/{name}/{version_path}")
            return extract_documentation(_expect_html(response))
        except Exception as e:
            logger.error(
                "Error getting crate documentation", exc_info=True,
                extra={'extra_data': {'crate': name, 'version': version_path}}
            )
            raise ScraperError(
                "get_crate_documentation", f"Failed to get documentation for crate {name}: {e}"
            ) from e

    async def get_type_info(self, crate_name: str, path: str, version: Optional[str] = None) -> RustType:
        name = _validate_crate_name(crate_name)
        item_path = _item_path(path)
        version_path = _version_path(version)
        full_path = f"{name}/{version_path}/{crate_ident(name)}/{item_path}"
        documentation_url = f"{DOCS_RS_BASE_URL}/{full_path}"

        logger.info("Getting type info", extra={'extra_data': {'crate': name, 'path': item_path, 'version': version_path}})
        try:
            response = await self.docs_client.get(full_path)
            return parse_type_page(_expect_html(response), item_path, documentation_url)
        except Exception as e:
            logger.error("Error getting type info", exc_info=True, extra={'extra_data': {'crate': name, 'path': item_path}})
            raise ScraperError("get_type_info", f"Failed to get type info for {item_path}: {e}") from e

    async def get_feature_flags(self, crate_name: str, version: Optional[str] = None) -> List[FeatureFlag]:
        name = _validate_crate_name(crate_name)
        version_path = _version_path(version)
        logger.info("Getting feature flags", extra={'extra_data': {'crate': name, 'version': version_path}})
        try:
            response = await self.docs_client.get(f"crate/{name}/{version_path}/features")
            return parse_feature_flags(_expect_html(response))
        except Exception as e:
            logger.error("Error getting feature flags", exc_info=True, extra={'extra_data': {'crate': name}})
            raise ScraperError("get_feature_flags", f"Failed to get feature flags for {name}: {e}") from e

    async def get_crate_versions(self, crate_name: str) -> List[CrateVersion]:
        """Registry version list, falling back to the docs.rs crate page when it is empty."""
        name = _validate_crate_name(crate_name)
        logger.info("Getting crate versions", extra={'extra_data': {'crate': name}})
        try:
            response = await self.crates_client.get(f"crates/{name}")
            versions = parse_registry_versions(_expect_json(response))
            if versions:
                return versions

            logger.info("Registry listed no versions, reading docs.rs", extra={'extra_data': {'crate': name}})
            page = await self.docs_client.get(f"crate/{name}")
            return parse_version_listing(_expect_html(page), name)
        except Exception as e:
            logger.error("Error getting crate versions", exc_info=True, extra={'extra_data': {'crate': name}})
            raise ScraperError("get_crate_versions", f"Failed to get crate versions for {name}: {e}") from e

    async def get_source_code(self, crate_name: str, path: str, version: Optional[str] = None) -> str:
        """Source text from the first candidate source URL that answers."""
        name = _validate_crate_name(crate_name)
        source_path = _item_path(path)
        version_path = _version_path(version)
        logger.info("Getting source code", extra={'extra_data': {'crate': name, 'path': source_path}})
        try:
            attempts: List[Tuple[str, Exception]] = []
            for candidate in source_candidates(name, version_path, source_path):
                try:
                    response = await self.docs_client.get(candidate)
                    html = _expect_html(response)
                except (HttpClientError, ResponseShapeError) as e:
                    attempts.append((self.docs_client.build_url(candidate), e))
                    logger.debug("Source candidate failed", extra={'extra_data': {'path': candidate, 'error': str(e)}})
                    continue
                return extract_source(html)
            raise SourceNotFoundError(attempts)
        except Exception as e:
            logger.error("Error getting source code", exc_info=True, extra={'extra_data': {'crate': name, 'path': source_path}})
            raise ScraperError("get_source_code", f"Failed to get source code for {source_path}: {e}") from e

    async def search_symbols(self, crate_name: str, query: str, version: Optional[str] = None) -> List[SymbolDefinition]:
        name = _validate_crate_name(crate_name)
        needle = _require(query, "query")
        version_path = _version_path(version)
        ident = crate_ident(name)
        index_path = f"{name}/{version_path}/{ident}/all.html"

        logger.info("Searching for symbols", extra={'extra_data': {'crate': name, 'query': needle}})
        try:
            try:
                response = await self.docs_client.get(index_path)
            except UpstreamHTTPError as e:
                if e.status != 404:
                    raise
                logger.info("Symbol index not found", extra={'extra_data': {'crate': name, 'url': e.url}})
                return []
            return parse_symbol_index(
                _expect_html(response), needle, ident, self.docs_client.build_url(index_path)
            )
        except Exception as e:
            logger.error("Error searching for symbols", exc_info=True, extra={'extra_data': {'crate': name, 'query': needle}})
            raise ScraperError("search_symbols", f"Failed to search for symbols in {name}: {e}") from e
