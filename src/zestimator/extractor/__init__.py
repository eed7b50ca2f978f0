"""
Zestimator Extraction Module

Pulls a home-value estimate (and optionally a postal address) out of a listing
page by walking its embedded data islands in a fixed priority order:

1. Next.js ``__NEXT_DATA__`` payload, including the double-encoded client cache
2. Shared-data and Apollo preload scripts, often wrapped in HTML comments
3. Raw-text regular expressions as a last resort
"""

from .address import extract_address, looks_like_address
from .decoder import decode, decode_all, decode_strict
from .engine import (
    BOT_SIGNATURES,
    detect_bot_block,
    extract_listing,
    extract_valuation,
    find_valuation_in_document,
    find_valuation_in_text,
)
from .islands import iter_json_ld, iter_next_data, iter_preload_islands, parse_document
from .models import Island, IslandKind, ListingResult, PostalAddress, Valuation, ValuationSource
from .normalize import normalize_number
from .search import find_by_keys, find_by_shape, find_valuation, iter_values_by_keys, looks_like_address_object

__all__ = [
    "BOT_SIGNATURES",
    "Island",
    "IslandKind",
    "ListingResult",
    "PostalAddress",
    "Valuation",
    "ValuationSource",
    "decode",
    "decode_all",
    "decode_strict",
    "detect_bot_block",
    "extract_address",
    "extract_listing",
    "extract_valuation",
    "find_by_keys",
    "find_by_shape",
    "find_valuation",
    "find_valuation_in_document",
    "find_valuation_in_text",
    "iter_json_ld",
    "iter_next_data",
    "iter_preload_islands",
    "iter_values_by_keys",
    "looks_like_address",
    "looks_like_address_object",
    "normalize_number",
    "parse_document",
]
