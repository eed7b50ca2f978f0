"""
Zestimate extraction engine.

Sources are tried in a fixed order and the first one that produces a number
wins:

1. the Next.js data island, searched as a whole
2. the double-encoded ``gdpClientCache`` blob nested inside it
3. shared-data and Apollo preload scripts, in document order
4. regular expressions over the raw HTML

A source that is missing or fails to decode simply hands over to the next one.
Only an empty body, a bot-check page, or running out of sources is reported to
the caller.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional, Sequence

import structlog
from selectolax.parser import HTMLParser

from ..exceptions import BotBlockDetected, EmptyResponse, ValuationExtractionFailed
from ..observability.metrics import METRICS, record_failure
from .address import extract_address
from .decoder import decode
from .islands import iter_next_data, iter_preload_islands, parse_document
from .models import IslandKind, ListingResult, Valuation, ValuationSource
from .normalize import parse_numeric_string
from .search import dig, find_valuation

logger = structlog.get_logger(__name__)

BOT_SIGNATURES: tuple[str, ...] = ("captcha", "verify you are a human", "Please verify")

CLIENT_CACHE_PATH = ("props", "pageProps", "componentProps", "gdpClientCache")

# "zestimate":1234567
BARE_ZESTIMATE_PATTERN = re.compile(r'"zestimate"\s*:\s*([0-9]{4,}(?:\.\d+)?)')
# "zestimate":{"amount":1234567 ...}
NESTED_ZESTIMATE_PATTERN = re.compile(
    r'"zestimate"\s*:\s*\{[^}]*?"(?:amount|value)"\s*:\s*([0-9]{4,}(?:\.\d+)?)',
    re.DOTALL,
)

_ISLAND_SOURCES = {
    IslandKind.SHARED_DATA: ValuationSource.SHARED_DATA,
    IslandKind.APOLLO_PRELOAD: ValuationSource.APOLLO_PRELOAD,
}


def detect_bot_block(html: str, signatures: Iterable[str] = BOT_SIGNATURES) -> Optional[str]:
    """Return the first bot-check signature found in ``html``, if any."""
    for signature in signatures:
        if signature in html:
            return signature
    return None


def ensure_listing_html(html: str, signatures: Iterable[str] = BOT_SIGNATURES) -> None:
    """Reject empty bodies and bot-check pages before any parsing happens."""
    if not html:
        record_failure(EmptyResponse.kind.value)
        raise EmptyResponse()

    signature = detect_bot_block(html, signatures)
    if signature is not None:
        logger.warning("Bot-check page detected", signature=signature)
        record_failure(BotBlockDetected.kind.value)
        raise BotBlockDetected(signature)


def find_valuation_in_text(html: str) -> Optional[Valuation]:
    """
    Last-resort regex scan of the raw page text.

    A match that does not parse to a finite number (an overflowing decimal, an
    integer too long to convert) hands over to the next pattern.
    """
    for pattern in (BARE_ZESTIMATE_PATTERN, NESTED_ZESTIMATE_PATTERN):
        match = pattern.search(html)
        if not match:
            continue
        value = parse_numeric_string(match.group(1))
        if value is not None:
            return Valuation(value, ValuationSource.RAW_TEXT)
    return None


def _from_next_data(doc: HTMLParser) -> Optional[Valuation]:
    for island in iter_next_data(doc):
        tree = decode(island.raw)
        if tree is None:
            continue

        value = find_valuation(tree)
        if value is not None:
            return Valuation(value, ValuationSource.NEXT_DATA)

        cache = dig(tree, CLIENT_CACHE_PATH)
        if isinstance(cache, str):
            cache_tree = decode(cache)
            if cache_tree is not None:
                value = find_valuation(cache_tree)
                if value is not None:
                    return Valuation(value, ValuationSource.CLIENT_CACHE)
    return None


def _from_preload_islands(doc: HTMLParser) -> Optional[Valuation]:
    for island in iter_preload_islands(doc):
        tree = decode(island.raw)
        if tree is None:
            continue
        value = find_valuation(tree)
        if value is not None:
            return Valuation(value, _ISLAND_SOURCES[island.kind])
    return None


def find_valuation_in_document(doc: HTMLParser, html: str) -> Optional[Valuation]:
    """
    Run every valuation source against an already parsed page.

    Args:
        doc: Parsed document
        html: The raw text ``doc`` was parsed from, used by the regex fallback

    Returns:
        The first valuation found, or None
    """
    valuation = _from_next_data(doc) or _from_preload_islands(doc) or find_valuation_in_text(html)
    if valuation is not None:
        logger.debug("Valuation found", source=valuation.source.value, value=valuation.value)
        METRICS["extractions_total"].labels(source=valuation.source.value).inc()
    return valuation


def extract_valuation(html: str, *, signatures: Sequence[str] = BOT_SIGNATURES) -> Valuation:
    """
    Extract the zestimate from a listing page.

    Raises:
        EmptyResponse: ``html`` is empty
        BotBlockDetected: ``html`` is a bot-check page
        ValuationExtractionFailed: no source produced a value
    """
    ensure_listing_html(html, signatures)

    valuation = find_valuation_in_document(parse_document(html), html)
    if valuation is None:
        record_failure(ValuationExtractionFailed.kind.value)
        raise ValuationExtractionFailed()
    return valuation


def extract_listing(html: str, *, signatures: Sequence[str] = BOT_SIGNATURES) -> ListingResult:
    """
    Extract both the address and the zestimate from a listing page.

    Either field may be missing; ValuationExtractionFailed is raised only when
    both are.
    """
    ensure_listing_html(html, signatures)

    doc = parse_document(html)
    address = extract_address(doc)
    valuation = find_valuation_in_document(doc, html)

    if address is None and valuation is None:
        record_failure(ValuationExtractionFailed.kind.value)
        raise ValuationExtractionFailed("Found neither an address nor a zestimate on the page.")

    return ListingResult(
        address=address.formatted if address is not None else None,
        zestimate=valuation.value if valuation is not None else None,
    )
