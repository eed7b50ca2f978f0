"""
Test configuration for Zestimator.

Provides configuration, HTTP client and sample-page fixtures shared by the
unit tests.
"""

# Standard library imports
import json
from typing import AsyncGenerator

# Third-party imports
import pytest
import pytest_asyncio

# Local imports
from zestimator.config import Config
from zestimator.crawler.http_client import HttpClient

from tests.helpers import next_data_page, preload_script, wrap_page

# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep the developer's environment from leaking into tests."""
    monkeypatch.delenv("UA", raising=False)
    monkeypatch.delenv("ZESTIMATOR_HTTP_PROXIES", raising=False)
    for name in ("ZESTIMATOR_HTTP__TIMEOUT", "ZESTIMATOR_HTTP__USER_AGENT", "ZESTIMATOR_MONITORING__LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config() -> Config:
    """Test configuration with a short timeout and a fixed user agent."""
    return Config.model_validate(
        {
            "http": {"timeout": 5.0, "user_agent": "ZestimatorTest/1.0"},
            "monitoring": {"log_level": "DEBUG"},
        }
    )


@pytest_asyncio.fixture
async def http_client(config) -> AsyncGenerator[HttpClient, None]:
    """Create and initialize HTTP client."""
    client = HttpClient(config)
    await client.initialize()
    yield client
    await client.close()


# ============================================================================
# Sample Pages
# ============================================================================


@pytest.fixture
def next_data_html() -> str:
    """Listing page whose zestimate lives directly in __NEXT_DATA__."""
    return next_data_page({"props": {"pageProps": {"zestimate": 598500}}})


@pytest.fixture
def client_cache_html() -> str:
    """Listing page whose zestimate is only inside the double-encoded client cache."""
    cache = json.dumps({"zestimate": {"amount": 3747600}})
    return next_data_page({"props": {"pageProps": {"componentProps": {"gdpClientCache": cache}}}})


@pytest.fixture
def preload_html() -> str:
    """Listing page with a comment-wrapped shared-data block."""
    return wrap_page(preload_script({"property": {"zestimate": {"value": "$812,300"}}}, commented=True))


@pytest.fixture
def full_listing_html() -> str:
    """Listing page with both a JSON-LD address and a zestimate."""
    json_ld = json.dumps(
        {
            "@type": "SingleFamilyResidence",
            "address": {
                "@type": "PostalAddress",
                "streetAddress": "123 Main St",
                "addressLocality": "Springfield",
                "addressRegion": "IL",
                "postalCode": "62704",
            },
        }
    )
    return next_data_page(
        {"props": {"pageProps": {"property": {"zestimate": 425000}}}},
        f'<script type="application/ld+json">{json_ld}</script>',
        title="123 Main St, Springfield, IL 62704 | Zillow",
    )
