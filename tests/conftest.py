"""Pytest configuration and fixtures for rust-docs-bridge tests.

The HTML fixtures are trimmed copies of the markup docs.rs serves, one per
capability, so selector changes can be checked without network access.
"""

from __future__ import annotations

import pytest

from rust_docs.http_client import create_crates_io_client, create_docs_rs_client
from rust_docs.scraper import DocsRsScraper


@pytest.fixture
def scraper() -> DocsRsScraper:
    """Scraper wired to the real origins; tests mock them with aioresponses."""
    return DocsRsScraper(create_docs_rs_client(), create_crates_io_client())


@pytest.fixture
def search_payload() -> dict:
    """crates.io search response body."""
    return {
        "crates": [
            {
                "name": "serde",
                "max_version": "1.0.197",
                "description": "A generic serialization/deserialization framework",
            },
            {"name": "serde_json", "max_version": "1.0.114", "description": None},
            {"name": "serde-nameless"},
        ],
        "meta": {"total": 24061},
    }


@pytest.fixture
def crate_payload() -> dict:
    """crates.io crate detail response body."""
    return {
        "crate": {
            "name": "tokio",
            "description": "An event-driven, non-blocking I/O platform.",
            "downloads": 250000000,
            "homepage": "https://tokio.rs",
            "repository": "https://github.com/tokio-rs/tokio",
            "documentation": "https://docs.rs/tokio/latest/tokio",
        },
        "versions": [
            {"num": "1.36.0", "yanked": False, "created_at": "2024-02-02T13:45:12.000000+00:00"},
            {"num": "1.35.1", "yanked": False, "created_at": "2023-12-19T09:12:01.000000+00:00"},
            {"num": "1.35.0", "yanked": True, "created_at": "2023-12-10T08:00:00.000000+00:00"},
        ],
    }


@pytest.fixture
def crate_page_html() -> str:
    """docs.rs crate overview page."""
    return """
    <!DOCTYPE html>
    <html lang="en">
    <head>
        <title>tokio 1.36.0 - Docs.rs</title>
        <script>var docsRsTheme = "light";</script>
    </head>
    <body>
        <nav class="nav-container"><a href="/">Docs.rs</a></nav>
        <div class="container package-page-container">
            <div id="main">
                <h1>Tokio</h1>
                <p>A runtime for writing <strong>reliable</strong> applications with Rust.</p>
                <h2>Example</h2>
                <pre class="rust"><code>#[tokio::main]
async fn main() {}</code></pre>
                <ul>
                    <li><a href="https://docs.rs/tokio/latest/tokio/net/">net</a> sockets</li>
                    <li>Tasks via <code>spawn</code></li>
                </ul>
            </div>
        </div>
    </body>
    </html>
    """


@pytest.fixture
def unstructured_page_html() -> str:
    """A page none of the documentation selectors match."""
    return """
    <html>
    <head><title>Moved</title></head>
    <body>
        <div class="landing">
            <h2>Welcome</h2>
            <p>Plain fallback text about the crate.</p>
        </div>
    </body>
    </html>
    """


@pytest.fixture
def struct_page_html() -> str:
    """rustdoc page for tokio::runtime::Runtime."""
    return """
    <html>
    <body class="rustdoc struct">
    <nav class="sidebar"><a class="mod" href="../index.html">tokio</a></nav>
    <main><div class="width-limiter"><section id="main-content" class="content">
        <div class="main-heading">
            <h1>Struct <a class="mod" href="../index.html">tokio</a>::<wbr><a class="mod" href="index.html">runtime</a>::<wbr><span class="struct">Runtime</span><button id="copy-path">Copy item path</button></h1>
            <span class="sub-heading"><a class="src" href="../../src/tokio/runtime/runtime.rs.html#76-90">Source</a></span>
        </div>
        <pre class="rust item-decl"><code>pub struct Runtime { /* private fields */ }</code></pre>
        <details class="toggle top-doc" open>
            <summary class="hideme"><span>Expand description</span></summary>
            <div class="docblock"><p>The Tokio runtime.</p><p>The runtime provides an I/O driver.</p></div>
        </details>
        <h2 id="implementations">Implementations</h2>
        <div class="impl-items">
            <section class="method"><h4 class="code-header">pub fn <a class="fn" href="#method.new">new</a>()</h4></section>
        </div>
    </section></div></main>
    </body>
    </html>
    """


@pytest.fixture
def trait_page_html() -> str:
    """rustdoc trait page whose implementors list links to structs."""
    return """
    <html>
    <body class="rustdoc">
    <section id="main-content" class="content">
        <div class="main-heading">
            <h1>Trait <a class="mod" href="../index.html">tokio</a>::<a class="mod" href="index.html">io</a>::<span class="trait">AsyncRead</span></h1>
        </div>
        <div class="docblock"><p>Reads bytes from a source.</p></div>
        <h2 id="implementors">Implementors</h2>
        <section class="impl"><h3 class="code-header">impl AsyncRead for <a class="struct" href="../net/struct.TcpStream.html">TcpStream</a></h3></section>
    </section>
    </body>
    </html>
    """


@pytest.fixture
def features_page_html() -> str:
    """docs.rs features page."""
    return """
    <html>
    <body>
    <div class="container package-page-container"><div class="pure-g">
        <div class="pure-u-1 pure-u-sm-7-24 pure-u-md-5-24">
            <div class="pure-menu package-menu">
                <ul class="pure-menu-list">
                    <li class="pure-menu-heading">Feature flags</li>
                    <li class="pure-menu-item"><a href="#default" class="pure-menu-link">default</a></li>
                </ul>
            </div>
        </div>
        <div class="pure-u-1 pure-u-sm-17-24 pure-u-md-19-24 package-details" id="main">
            <h1>tokio 1.36.0</h1>
            <p>This version has 4 feature flags, 1 of them enabled by default.</p>
            <h3 id="default">default</h3>
            <ul class="pure-menu-list"><li class="pure-menu-item"><span>rt</span></li></ul>
            <h3 id="rt">rt (default)</h3>
            <p>Enables the basic runtime.</p>
            <h3 id="full">full</h3>
            <ul class="pure-menu-list"><li><span>rt</span></li><li><span>net</span></li></ul>
            <h3 id="net">net</h3>
            <p class="default-feature">Networking support.</p>
            <h3 id="default-tls">default-tls</h3>
            <p>TLS through the platform library.</p>
        </div>
    </div></div>
    </body>
    </html>
    """


@pytest.fixture
def legacy_features_html() -> str:
    """Older features markup with one block per feature."""
    return """
    <html>
    <body>
        <div class="features">
            <div class="feature feature-enabled">
                <span class="feature-name">std</span>
                <span class="feature-description">Use the standard library</span>
            </div>
            <div class="feature"><span class="feature-name">alloc</span></div>
            <div class="feature feature-enabled"><span class="feature-name">default</span></div>
        </div>
    </body>
    </html>
    """


@pytest.fixture
def version_list_html() -> str:
    """docs.rs crate page with an explicit release list."""
    return """
    <html>
    <body>
        <ul class="versions">
            <li><a href="/crate/tokio/latest">latest</a></li>
            <li><a href="/crate/tokio/1.36.0">1.36.0</a></li>
            <li class="yanked"><a href="/crate/tokio/1.35.0">1.35.0</a></li>
            <li><a href="/crate/tokio/1.36.0">1.36.0</a></li>
        </ul>
    </body>
    </html>
    """


@pytest.fixture
def version_links_html() -> str:
    """docs.rs crate page without a release list; versions only appear in links."""
    return """
    <html>
    <body>
        <a href="/crate/tokio/latest">latest</a>
        <a href="/crate/tokio/1.36.0">1.36.0</a>
        <a href="/crate/tokio/1.36.0/features">Feature flags</a>
        <a href="/crate/tokio/1.35.1/source/">Source</a>
        <a href="/crate/tokio-util/0.7.10">tokio-util</a>
    </body>
    </html>
    """


@pytest.fixture
def rustdoc_source_html() -> str:
    """rustdoc source view with a line-number gutter."""
    return """
    <html>
    <body class="rustdoc src">
    <main><div class="example-wrap">
        <div data-nosnippet><pre class="src-line-numbers"><a href="#1">1</a>
<a href="#2">2</a></pre></div>
        <pre class="rust"><code><span class="kw">pub mod </span>builder;
<span class="kw">pub use </span>runtime::Runtime;</code></pre>
    </div></main>
    </body>
    </html>
    """


@pytest.fixture
def source_browser_html() -> str:
    """docs.rs source browser page."""
    return """
    <html>
    <body>
        <div class="package-page-container">
            <div id="source-code"><pre><code class="language-rust">fn main() {}</code></pre></div>
        </div>
    </body>
    </html>
    """


@pytest.fixture
def all_items_html() -> str:
    """rustdoc all.html listing for tokio."""
    return """
    <html>
    <body class="rustdoc mod">
    <section id="main-content" class="content">
        <h1>List of all items</h1>
        <h3 id="structs">Structs</h3>
        <ul class="all-items">
            <li><a href="runtime/struct.Runtime.html">runtime::Runtime</a></li>
            <li><a href="runtime/struct.Builder.html">runtime::Builder</a></li>
            <li><a href="net/struct.TcpStream.html">net::TcpStream</a></li>
        </ul>
        <h3 id="enums">Enums</h3>
        <ul class="all-items">
            <li><a href="runtime/enum.RuntimeFlavor.html">runtime::RuntimeFlavor</a></li>
        </ul>
        <h3 id="functions">Functions</h3>
        <ul class="all-items">
            <li><a href="task/fn.spawn.html">task::spawn</a></li>
        </ul>
        <h3 id="macros">Macros</h3>
        <ul class="all-items">
            <li><a href="macro.select.html">select</a></li>
        </ul>
    </section>
    </body>
    </html>
    """
