"""
Address to zestimate lookups.

A lookup is two dependent network steps: resolve the address to a home details
URL through the search endpoint, then fetch that page and run the extraction
engine on it. Every function here is stateless; concurrent lookups share
nothing but, optionally, the HttpClient passed in.
"""

from __future__ import annotations

import re
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Dict, Optional

import structlog

from .config.config import Config
from .crawler.http_client import HttpClient
from .crawler.user_agents import build_headers
from .exceptions import AddressResolutionFailed, EmptyResponse, HttpStatusError
from .extractor.engine import extract_listing, extract_valuation
from .extractor.models import ListingResult
from .observability.metrics import record_failure
from .utils.slugify import address_slug

logger = structlog.get_logger(__name__)

HOME_DETAILS_MARKER = "/homedetails/"
HOME_DETAILS_LINK_PATTERN = re.compile(r"(/homedetails/[A-Za-z0-9\-_/]+_zpid/)")


@dataclass(frozen=True)
class Zestimate:
    """The zestimate for a home and the page it came from."""

    address: str
    zestimate: int
    home_details_url: str

    @property
    def zestimate_formatted(self) -> str:
        """The zestimate in US dollars, e.g. ``$598,500.00``."""
        return f"${self.zestimate:,.2f}"


def search_url(address: str, base_url: str = "https://www.zillow.com") -> str:
    """The search URL that redirects (or links) to an address's home details page."""
    return f"{base_url}/homes/{address_slug(address)}_rb/"


def _absolute(location: str, base_url: str) -> str:
    return location if location.startswith("http") else f"{base_url}{location}"


def _headers_for(config: Config, address: Optional[str]) -> Dict[str, str]:
    return build_headers(config.http, referer_query=f"zillow {address}" if address else None)


@asynccontextmanager
async def _client_scope(client: Optional[HttpClient], config: Config) -> AsyncIterator[HttpClient]:
    """Use the caller's client, or open one for the duration of the call."""
    if client is not None:
        yield client
        return
    async with HttpClient(config) as owned:
        yield owned


async def resolve_home_details_url(address: str, client: HttpClient, config: Optional[Config] = None) -> str:
    """
    Resolve a free-form address to its home details URL.

    The search endpoint either redirects straight to the listing or returns a
    results page that links to it.

    Raises:
        AddressResolutionFailed: Neither a redirect nor a link was found
        FetchTimeout: The search request exceeded its deadline
    """
    config = config or client.config
    base_url = config.http.base_url
    url = search_url(address, base_url)

    response = await client.get(url, headers=_headers_for(config, address), allow_redirects=False)

    if 300 <= response.status < 400:
        location = response.location
        if location and HOME_DETAILS_MARKER in location:
            resolved = _absolute(location, base_url)
            logger.info("Address resolved by redirect", address=address, url=resolved)
            return resolved

    match = HOME_DETAILS_LINK_PATTERN.search(response.text)
    if match:
        resolved = f"{base_url}{match.group(1)}"
        logger.info("Address resolved from search page", address=address, url=resolved)
        return resolved

    logger.warning("Address could not be resolved", address=address, status=response.status)
    record_failure(AddressResolutionFailed.kind.value)
    raise AddressResolutionFailed(address)


async def fetch_home_details_html(url: str, client: HttpClient, headers: Optional[Dict[str, str]] = None) -> str:
    """
    Fetch a home details page.

    Raises:
        HttpStatusError: The response was not a 200
        FetchTimeout: The request exceeded its deadline
    """
    response = await client.get(url, headers=headers)
    if response.status != 200:
        record_failure(HttpStatusError.kind.value)
        raise HttpStatusError(response.status, url)
    return response.text


async def get_home_value_from_url(
    url: str,
    *,
    address: Optional[str] = None,
    client: Optional[HttpClient] = None,
    config: Optional[Config] = None,
) -> int:
    """Fetch a home details page and return its zestimate in whole dollars."""
    config = config or (client.config if client is not None else Config())

    async with _client_scope(client, config) as http:
        html = await fetch_home_details_html(url, http, _headers_for(config, address))

    if not html:
        record_failure(EmptyResponse.kind.value)
        raise EmptyResponse(url)

    valuation = extract_valuation(html, signatures=config.extraction.bot_signatures)
    logger.info("Zestimate extracted", url=url, value=valuation.value, source=valuation.source.value)
    return int(valuation.value)


async def get_zestimate(
    address: str,
    *,
    home_details_url: Optional[str] = None,
    client: Optional[HttpClient] = None,
    config: Optional[Config] = None,
) -> Zestimate:
    """
    Look up the zestimate for an address.

    Args:
        address: Free-form postal address
        home_details_url: Skip resolution and use this page directly
        client: Shared HttpClient; one is opened and closed if omitted
        config: Settings (defaults to ``client.config`` or a fresh Config)

    Returns:
        Zestimate with the value and the URL that produced it
    """
    config = config or (client.config if client is not None else Config())

    with structlog.contextvars.bound_contextvars(lookup_id=uuid.uuid4().hex[:12]):
        async with _client_scope(client, config) as http:
            url = home_details_url or await resolve_home_details_url(address, http, config)
            value = await get_home_value_from_url(url, address=address, client=http, config=config)

    return Zestimate(address=address, zestimate=value, home_details_url=url)


async def scrape_listing(
    url: str,
    *,
    client: Optional[HttpClient] = None,
    config: Optional[Config] = None,
) -> ListingResult:
    """Fetch a listing page and extract both its address and zestimate."""
    config = config or (client.config if client is not None else Config())

    with structlog.contextvars.bound_contextvars(lookup_id=uuid.uuid4().hex[:12]):
        async with _client_scope(client, config) as http:
            html = await fetch_home_details_html(url, http, _headers_for(config, None))

        if not html:
            record_failure(EmptyResponse.kind.value)
            raise EmptyResponse(url)

        result = extract_listing(html, signatures=config.extraction.bot_signatures)
        logger.info("Listing scraped", url=url, address=result.address, zestimate=result.zestimate)
        return result
