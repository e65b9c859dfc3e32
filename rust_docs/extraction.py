#!/usr/bin/env python3
"""
HTML extraction engine.

Selector strategies are small "extract-or-none" callables. A capability lists
them from the most specific (the markup docs.rs serves today) to the most
generic, and first_match returns the first non-empty result. Nothing here does
I/O, so every strategy list can be tested against fixed HTML.
"""

import re
from typing import Callable, List, Optional, Sequence, TypeVar, Union

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import Comment, Declaration, Doctype, ProcessingInstruction

T = TypeVar("T")
Strategy = Callable[[Tag], Optional[T]]

NOT_FOUND = "Documentation content not found"

# Page chrome that never carries documentation
SKIPPED_TAGS = {
    "script", "style", "noscript", "nav", "button", "svg", "template",
    "form", "input", "select", "head", "iframe", "rustdoc-toolbar",
}
BLOCK_TAGS = {
    "p", "div", "section", "article", "main", "header", "footer", "aside",
    "blockquote", "details", "summary", "dl", "dt", "dd", "table", "thead",
    "tbody", "figure", "body", "html",
}
HEADING_TAGS = {"h1", "h2", "h3", "h4", "h5", "h6"}
_IGNORED_STRINGS = (Comment, Declaration, Doctype, ProcessingInstruction)
_NESTED_ITEM = re.compile(r"^\s+(- |\d+\. )")


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, 'html.parser')


def _has_content(element: Tag) -> bool:
    return bool(element.get_text(strip=True))


def select_first(selector: str) -> Strategy[Tag]:
    """Strategy returning the first element matching selector that has text."""
    def strategy(root: Tag) -> Optional[Tag]:
        for element in root.select(selector):
            if _has_content(element):
                return element
        return None
    strategy.__name__ = f"select_first({selector!r})"
    return strategy


def select_all(selector: str) -> Strategy[List[Tag]]:
    """Strategy returning every element matching selector, or None when there are none."""
    def strategy(root: Tag) -> Optional[List[Tag]]:
        return root.select(selector) or None
    strategy.__name__ = f"select_all({selector!r})"
    return strategy


def render_first(selector: str) -> Strategy[str]:
    """Strategy returning the markdown of the first element matching selector that renders to text."""
    def strategy(root: Tag) -> Optional[str]:
        for element in root.select(selector):
            markdown = html_to_markdown(element)
            if markdown:
                return markdown
        return None
    strategy.__name__ = f"render_first({selector!r})"
    return strategy


def first_match(root: Tag, strategies: Sequence[Strategy[T]]) -> Optional[T]:
    """Evaluate strategies in order; the first non-empty result wins."""
    for strategy in strategies:
        result = strategy(root)
        if result:
            return result
    return None


def find_first(root: Tag, selectors: Sequence[str]) -> Optional[Tag]:
    """First element with text matched by any of the selectors, in selector order."""
    return first_match(root, [select_first(selector) for selector in selectors])


def extract_markdown(root: Tag, selectors: Sequence[str], default: str = NOT_FOUND) -> str:
    """Markdown for the first fragment that renders to text, or default when none does."""
    return first_match(root, [render_first(selector) for selector in selectors]) or default


def html_to_markdown(fragment: Union[Tag, str]) -> str:
    """
    Flatten an HTML fragment into readable markdown-style text.

    Headings, paragraphs, lists, code blocks, inline code and links are kept;
    every other tag is dropped and only its text survives.
    """
    if isinstance(fragment, str):
        fragment = parse_html(fragment)
    return _tidy(_render(fragment))


def _render_children(node: Tag) -> str:
    return "".join(_render(child) for child in node.children)


def _render(node) -> str:
    if isinstance(node, _IGNORED_STRINGS):
        return ""
    if isinstance(node, NavigableString):
        return re.sub(r"\s+", " ", str(node))
    if not isinstance(node, Tag):
        return ""

    name = node.name
    if name in SKIPPED_TAGS:
        return ""

    if name in HEADING_TAGS:
        text = " ".join(_render_children(node).split())
        return f"\n\n{'#' * int(name[1])} {text}\n\n" if text else ""

    if name == "pre":
        classes = " ".join(node.get("class", []))
        lang = "rust" if "rust" in classes or node.select_one("code.language-rust") else ""
        code = node.get_text().strip("\n")
        return f"\n\n```{lang}\n{code}\n```\n\n" if code.strip() else ""

    if name == "code":
        code = node.get_text()
        return f"`{code}`" if code.strip() else ""

    if name == "a":
        text = " ".join(_render_children(node).split())
        href = node.get("href")
        if text and href and not href.startswith("#") and not href.startswith("javascript:"):
            return f"[{text}]({href})"
        return text

    if name in ("ul", "ol"):
        items = []
        for index, li in enumerate(node.find_all("li", recursive=False), start=1):
            lines = [line for line in _tidy(_render_children(li)).splitlines() if line.strip()]
            if not lines:
                continue
            marker = "-" if name == "ul" else f"{index}."
            items.append(f"{marker} {lines[0]}" + "".join(f"\n  {line}" for line in lines[1:]))
        return "\n\n" + "\n".join(items) + "\n\n" if items else ""

    if name == "tr":
        cells = [" ".join(cell.get_text(" ", strip=True).split()) for cell in node.find_all(["th", "td"], recursive=False)]
        return " | ".join(cells) + "\n" if any(cells) else ""

    if name == "br":
        return "\n"

    if name in ("strong", "b"):
        text = _render_children(node).strip()
        return f"**{text}**" if text else ""

    if name in ("em", "i"):
        text = _render_children(node).strip()
        return f"*{text}*" if text else ""

    if name in BLOCK_TAGS:
        text = _render_children(node).strip()
        return f"\n\n{text}\n\n" if text else ""

    return _render_children(node)


def _tidy(text: str) -> str:
    """Trim stray whitespace outside code fences and collapse blank runs."""
    lines = []
    in_fence = False
    for line in text.split("\n"):
        if line.lstrip().startswith("```"):
            in_fence = not in_fence
            lines.append(line.rstrip())
        elif in_fence:
            lines.append(line.rstrip())
        elif _NESTED_ITEM.match(line):
            lines.append(line.rstrip())
        else:
            lines.append(line.strip())
    return re.sub(r"\n{3,}", "\n\n", "\n".join(lines)).strip()
