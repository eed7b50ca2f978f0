"""
Data models for extraction results.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

Number = Union[int, float]


class IslandKind(str, Enum):
    """Embedding conventions the island locator recognizes."""

    NEXT_DATA = "next_data"
    SHARED_DATA = "shared_data"
    APOLLO_PRELOAD = "apollo_preload"
    JSON_LD = "json_ld"


class ValuationSource(str, Enum):
    """Where a valuation was found."""

    NEXT_DATA = "next_data"
    CLIENT_CACHE = "client_cache"
    SHARED_DATA = "shared_data"
    APOLLO_PRELOAD = "apollo_preload"
    RAW_TEXT = "raw_text"


@dataclass(slots=True, frozen=True)
class Island:
    """A raw JSON candidate located in the document."""

    kind: IslandKind
    raw: str


@dataclass(slots=True, frozen=True)
class Valuation:
    """A home-value estimate and the source that produced it."""

    value: Number
    source: ValuationSource

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise ValueError("Valuation must be a number")
        if isinstance(self.value, float) and not math.isfinite(self.value):
            raise ValueError("Valuation must be a finite number")


@dataclass(slots=True, frozen=True)
class PostalAddress:
    """A postal address as found on a listing page."""

    line1: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None
    postal_code: Optional[str] = None
    formatted_address: Optional[str] = None

    @property
    def formatted(self) -> Optional[str]:
        """Single-line rendering, preferring the page's own formatted address."""
        if self.formatted_address:
            return self.formatted_address
        return join_address(self.line1, self.city, self.region, self.postal_code)


@dataclass(slots=True, frozen=True)
class ListingResult:
    """Address and zestimate scraped from one listing page."""

    address: Optional[str] = None
    zestimate: Optional[Number] = None

    @property
    def zestimate_formatted(self) -> str:
        if self.zestimate is None:
            return "—"
        return f"${self.zestimate:,.0f}"

    def __str__(self) -> str:
        return f"address: {self.address or '—'} | zestimate: {self.zestimate_formatted}"


def join_address(
    line1: Optional[str],
    city: Optional[str],
    region: Optional[str],
    postal_code: Optional[str],
) -> Optional[str]:
    """Join address parts as ``line1, city, region, zip``, skipping blanks."""
    parts = [part.strip() for part in (line1, city, region, postal_code) if part and part.strip()]
    if not parts:
        return None
    return ", ".join(parts)
