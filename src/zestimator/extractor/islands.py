"""
Locate embedded JSON islands in a listing page.

Every locator is a generator so callers can stop at the first island that
yields a result without touching the rest of the document.
"""

from __future__ import annotations

from typing import Iterator

from selectolax.parser import HTMLParser, Node

from .decoder import strip_comment_wrapper
from .models import Island, IslandKind

NEXT_DATA_SELECTOR = "#__NEXT_DATA__"
JSON_LD_SELECTOR = 'script[type="application/ld+json"]'
SHARED_DATA_ATTRIBUTE = "data-zrr-shared-data-key"
APOLLO_ID_PREFIX = "hdpApolloPreloadedData"


def parse_document(html: str) -> HTMLParser:
    """Parse a page body into a queryable document."""
    return HTMLParser(html)


def _text(node: Node) -> str:
    return (node.text(deep=True) or "").strip()


def iter_next_data(doc: HTMLParser) -> Iterator[Island]:
    """Yield the Next.js data island, if the page has one."""
    node = doc.css_first(NEXT_DATA_SELECTOR)
    if node is None:
        return
    raw = _text(node)
    if raw:
        yield Island(IslandKind.NEXT_DATA, raw)


def _preload_kind(node: Node) -> IslandKind | None:
    attributes = node.attributes
    if SHARED_DATA_ATTRIBUTE in attributes:
        return IslandKind.SHARED_DATA
    if (attributes.get("id") or "").startswith(APOLLO_ID_PREFIX):
        return IslandKind.APOLLO_PRELOAD
    return None


def iter_preload_islands(doc: HTMLParser) -> Iterator[Island]:
    """
    Yield shared-data and Apollo preload scripts in document order.

    These blocks are often wrapped in ``<!-- ... -->``, the wrapper is removed
    before the text is handed on.
    """
    for node in doc.css("script"):
        kind = _preload_kind(node)
        if kind is None:
            continue
        raw = _text(node)
        if raw.startswith("<!--"):
            raw = strip_comment_wrapper(raw)
        if not raw:
            continue
        yield Island(kind, raw)


def iter_json_ld(doc: HTMLParser) -> Iterator[Island]:
    """Yield every ``application/ld+json`` script."""
    for node in doc.css(JSON_LD_SELECTOR):
        raw = _text(node)
        if raw:
            yield Island(IslandKind.JSON_LD, raw)


def page_title(doc: HTMLParser) -> str | None:
    node = doc.css_first("title")
    if node is None:
        return None
    return _text(node) or None
