"""
Postal address extraction for listing pages.

Sources are tried in order: JSON-LD, the Next.js data island, preload islands,
and finally the page ``<title>``.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Optional

import structlog
from selectolax.parser import HTMLParser

from .decoder import decode, decode_all
from .islands import iter_json_ld, iter_next_data, iter_preload_islands, page_title
from .models import PostalAddress
from .search import find_by_keys, find_by_shape, looks_like_address_object

logger = structlog.get_logger(__name__)

LINE1_KEYS = ("streetAddress", "addressLine1", "line1")
CITY_KEYS = ("addressLocality", "city", "locality")
REGION_KEYS = ("addressRegion", "state", "region")
POSTAL_KEYS = ("postalCode", "zipcode", "zip")
SINGLE_LINE_KEYS = ("formattedAddress", "fullAddress")

# Looser key sets used when the Next.js payload has no single address object
TREE_LINE1_KEYS = ("streetAddress", "line1", "addressLine1")
TREE_CITY_KEYS = ("addressLocality", "city")
TREE_REGION_KEYS = ("addressRegion", "state")

ADDRESS_PATTERNS = (
    re.compile(r"\d{2,} .+?, .+?, [A-Z]{2} \d{5}"),
    re.compile(r"\d{2,} .+?, [A-Z]{2} \d{5}"),
)
TITLE_PATTERN = re.compile(r"^\s*(.+?),\s*Zillow", re.IGNORECASE)


def looks_like_address(text: str) -> bool:
    """Light check for ``123 Main St, City, ST 12345`` style strings."""
    return any(pattern.search(text) for pattern in ADDRESS_PATTERNS)


def _string(tree: Any, keys: tuple[str, ...]) -> Optional[str]:
    return find_by_keys(tree, keys, case_insensitive=True, value_type=str)


def address_from_object(obj: Dict[str, Any]) -> PostalAddress:
    """Build a PostalAddress from an address-shaped mapping."""
    return PostalAddress(
        line1=_string(obj, LINE1_KEYS),
        city=_string(obj, CITY_KEYS),
        region=_string(obj, REGION_KEYS),
        postal_code=_string(obj, POSTAL_KEYS),
        formatted_address=_string(obj, SINGLE_LINE_KEYS),
    )


def _from_shape(tree: Any) -> Optional[PostalAddress]:
    node = find_by_shape(tree, looks_like_address_object)
    if node is None:
        return None
    address = address_from_object(node)
    return address if address.formatted else None


def _from_scattered_keys(tree: Any) -> Optional[PostalAddress]:
    address = PostalAddress(
        line1=_string(tree, TREE_LINE1_KEYS),
        city=_string(tree, TREE_CITY_KEYS),
        region=_string(tree, TREE_REGION_KEYS),
        postal_code=_string(tree, POSTAL_KEYS),
    )
    return address if address.formatted else None


def _from_title(doc: HTMLParser) -> Optional[PostalAddress]:
    title = page_title(doc)
    if title is None:
        return None
    match = TITLE_PATTERN.search(title)
    candidate = match.group(1) if match else title.replace("| Zillow", "").strip()
    if looks_like_address(candidate):
        return PostalAddress(formatted_address=candidate)
    return None


def extract_address(doc: HTMLParser) -> Optional[PostalAddress]:
    """Find the listing's postal address, or None when no source has one."""
    for island in iter_json_ld(doc):
        for obj in decode_all(island.raw):
            address = _from_shape(obj)
            if address is not None:
                logger.debug("Address found", source="json_ld")
                return address
            # Some JSON-LD blocks put the full address in "name"
            name = obj.get("name")
            if isinstance(name, str) and looks_like_address(name):
                logger.debug("Address found", source="json_ld_name")
                return PostalAddress(formatted_address=name)

    for island in iter_next_data(doc):
        tree = decode(island.raw)
        if tree is None:
            continue
        address = _from_shape(tree) or _from_scattered_keys(tree)
        if address is not None:
            logger.debug("Address found", source="next_data")
            return address

    for island in iter_preload_islands(doc):
        tree = decode(island.raw)
        if tree is None:
            continue
        address = _from_shape(tree)
        if address is not None:
            logger.debug("Address found", source=island.kind.value)
            return address

    address = _from_title(doc)
    if address is not None:
        logger.debug("Address found", source="title")
    return address
