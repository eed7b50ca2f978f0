"""
Unit tests for address resolution and end-to-end lookups.
"""

import pytest
from aioresponses import aioresponses
from zestimator.exceptions import (
    AddressResolutionFailed,
    BotBlockDetected,
    EmptyResponse,
    HttpStatusError,
    ValuationExtractionFailed,
)
from zestimator.lookup import (
    Zestimate,
    get_home_value_from_url,
    get_zestimate,
    resolve_home_details_url,
    scrape_listing,
)
from zestimator.observability.metrics import METRICS

from tests.helpers import metric_delta, wrap_page

ADDRESS = "123 Main St, Springfield, IL 62704"
SEARCH_URL = "https://www.zillow.com/homes/123-Main-St-Springfield-IL-62704_rb/"
DETAILS_PATH = "/homedetails/123-Main-St-Springfield-IL-62704/5678_zpid/"
DETAILS_URL = f"https://www.zillow.com{DETAILS_PATH}"


@pytest.mark.unit
class TestResolveHomeDetailsUrl:
    @pytest.mark.asyncio
    async def test_relative_redirect(self, http_client):
        with aioresponses() as m:
            m.get(SEARCH_URL, status=301, headers={"Location": DETAILS_PATH})
            assert await resolve_home_details_url(ADDRESS, http_client) == DETAILS_URL

    @pytest.mark.asyncio
    async def test_absolute_redirect(self, http_client):
        with aioresponses() as m:
            m.get(SEARCH_URL, status=302, headers={"Location": DETAILS_URL})
            assert await resolve_home_details_url(ADDRESS, http_client) == DETAILS_URL

    @pytest.mark.asyncio
    async def test_link_in_search_page(self, http_client):
        body = wrap_page(f'<a href="{DETAILS_PATH}">123 Main St</a>')
        with aioresponses() as m:
            m.get(SEARCH_URL, status=200, body=body)
            assert await resolve_home_details_url(ADDRESS, http_client) == DETAILS_URL

    @pytest.mark.asyncio
    async def test_redirect_elsewhere_falls_back_to_body(self, http_client):
        with aioresponses() as m:
            m.get(SEARCH_URL, status=302, headers={"Location": "/homes/for_sale/"}, body=f"see {DETAILS_PATH}")
            assert await resolve_home_details_url(ADDRESS, http_client) == DETAILS_URL

    @pytest.mark.asyncio
    async def test_unresolvable(self, http_client):
        with aioresponses() as m:
            m.get(SEARCH_URL, status=200, body=wrap_page("<p>No matching results</p>"))
            with metric_delta(METRICS["failures_total"].labels(kind="address_resolution_failed")):
                with pytest.raises(AddressResolutionFailed) as exc_info:
                    await resolve_home_details_url(ADDRESS, http_client)

        assert exc_info.value.address == ADDRESS

    @pytest.mark.asyncio
    async def test_sends_browser_headers(self, http_client):
        with aioresponses() as m:
            m.get(SEARCH_URL, status=301, headers={"Location": DETAILS_PATH})
            await resolve_home_details_url(ADDRESS, http_client)

            (call,) = [calls for calls in m.requests.values()][0]
            headers = call.kwargs["headers"]
            assert headers["User-Agent"] == "ZestimatorTest/1.0"
            assert headers["Referer"].startswith("https://www.google.com/search?q=zillow+123+Main+St")
            assert call.kwargs["allow_redirects"] is False


@pytest.mark.unit
class TestGetHomeValueFromUrl:
    @pytest.mark.asyncio
    async def test_success(self, http_client, next_data_html):
        with aioresponses() as m:
            m.get(DETAILS_URL, status=200, body=next_data_html)
            assert await get_home_value_from_url(DETAILS_URL, client=http_client) == 598500

    @pytest.mark.asyncio
    async def test_fractional_value_is_truncated(self, http_client):
        with aioresponses() as m:
            m.get(DETAILS_URL, status=200, body='<script>{"zestimate": 432100.75}</script>')
            assert await get_home_value_from_url(DETAILS_URL, client=http_client) == 432100

    @pytest.mark.asyncio
    async def test_http_status_error(self, http_client):
        with aioresponses() as m:
            m.get(DETAILS_URL, status=403, body="Forbidden")
            with pytest.raises(HttpStatusError) as exc_info:
                await get_home_value_from_url(DETAILS_URL, client=http_client)

        assert exc_info.value.status == 403
        assert exc_info.value.url == DETAILS_URL

    @pytest.mark.asyncio
    async def test_empty_body(self, http_client):
        with aioresponses() as m:
            m.get(DETAILS_URL, status=200, body="")
            with pytest.raises(EmptyResponse) as exc_info:
                await get_home_value_from_url(DETAILS_URL, client=http_client)

        assert exc_info.value.url == DETAILS_URL

    @pytest.mark.asyncio
    async def test_bot_block(self, http_client):
        with aioresponses() as m:
            m.get(DETAILS_URL, status=200, body="<html>Please verify you are human</html>")
            with pytest.raises(BotBlockDetected):
                await get_home_value_from_url(DETAILS_URL, client=http_client)

    @pytest.mark.asyncio
    async def test_configured_signatures(self, config, next_data_html):
        config = config.model_copy(update={"extraction": config.extraction.model_copy(update={"bot_signatures": ["pageProps"]})})
        with aioresponses() as m:
            m.get(DETAILS_URL, status=200, body=next_data_html)
            with pytest.raises(BotBlockDetected):
                await get_home_value_from_url(DETAILS_URL, config=config)


@pytest.mark.unit
class TestGetZestimate:
    @pytest.mark.asyncio
    async def test_full_lookup(self, http_client, client_cache_html):
        with aioresponses() as m:
            m.get(SEARCH_URL, status=301, headers={"Location": DETAILS_PATH})
            m.get(DETAILS_URL, status=200, body=client_cache_html)
            result = await get_zestimate(ADDRESS, client=http_client)

        assert result == Zestimate(address=ADDRESS, zestimate=3747600, home_details_url=DETAILS_URL)
        assert result.zestimate_formatted == "$3,747,600.00"

    @pytest.mark.asyncio
    async def test_known_url_skips_resolution(self, config, next_data_html):
        with aioresponses() as m:
            m.get(DETAILS_URL, status=200, body=next_data_html)
            result = await get_zestimate(ADDRESS, home_details_url=DETAILS_URL, config=config)

        assert result.zestimate == 598500
        assert result.zestimate_formatted == "$598,500.00"
        assert result.home_details_url == DETAILS_URL

    @pytest.mark.asyncio
    async def test_extraction_failure(self, http_client):
        with aioresponses() as m:
            m.get(SEARCH_URL, status=301, headers={"Location": DETAILS_PATH})
            m.get(DETAILS_URL, status=200, body=wrap_page("<p>Listing without data</p>"))
            with pytest.raises(ValuationExtractionFailed):
                await get_zestimate(ADDRESS, client=http_client)

    @pytest.mark.asyncio
    async def test_shared_client_stays_open(self, http_client, next_data_html):
        with aioresponses() as m:
            m.get(DETAILS_URL, status=200, body=next_data_html)
            await get_zestimate(ADDRESS, home_details_url=DETAILS_URL, client=http_client)

        assert http_client.is_initialized


@pytest.mark.unit
class TestScrapeListing:
    @pytest.mark.asyncio
    async def test_scrape(self, http_client, full_listing_html):
        with aioresponses() as m:
            m.get(DETAILS_URL, status=200, body=full_listing_html)
            result = await scrape_listing(DETAILS_URL, client=http_client)

        assert result.address == "123 Main St, Springfield, IL, 62704"
        assert result.zestimate == 425000

    @pytest.mark.asyncio
    async def test_empty_body(self, http_client):
        with aioresponses() as m:
            m.get(DETAILS_URL, status=200, body="")
            with pytest.raises(EmptyResponse):
                await scrape_listing(DETAILS_URL, client=http_client)
