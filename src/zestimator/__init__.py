"""
Zestimator - look up Zillow home-value estimates by address.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import Config
from .extractor import ListingResult, Valuation, ValuationSource, extract_listing, extract_valuation
from .lookup import Zestimate, get_home_value_from_url, get_zestimate, resolve_home_details_url, scrape_listing

__all__ = [
    "__version__",
    "Config",
    "ListingResult",
    "Valuation",
    "ValuationSource",
    "Zestimate",
    "extract_listing",
    "extract_valuation",
    "get_home_value_from_url",
    "get_zestimate",
    "resolve_home_details_url",
    "scrape_listing",
]
