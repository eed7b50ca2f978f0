"""
HTTP client for listing-site requests with timeouts, proxy rotation and observability.
"""

from __future__ import annotations

import asyncio
import os
import time
from dataclasses import dataclass
from typing import Dict, List, Optional
from urllib.parse import urlparse

import aiohttp
import structlog

from ..config.config import Config
from ..exceptions import FetchTimeout
from ..observability.metrics import METRICS, record_failure

logger = structlog.get_logger(__name__)

PROXIES_ENV_VAR = "ZESTIMATOR_HTTP_PROXIES"


@dataclass
class FetchResponse:
    """Status, lower-cased headers and decoded body of a single GET."""

    status: int
    headers: Dict[str, str]
    text: str

    @property
    def location(self) -> Optional[str]:
        """The redirect target, if the server sent one."""
        return self.headers.get("location")


class HttpClient:
    """aiohttp session wrapper issuing browser-like GET requests."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()
        self.http_config = self.config.http

        self.proxies: List[str] = []
        self._proxy_index = 0
        self._setup_proxies()

        # Session will be initialized in initialize()
        self.session: Optional[aiohttp.ClientSession] = None

        logger.debug(
            "HTTP client created",
            timeout=self.http_config.timeout,
            proxies_count=len(self.proxies),
        )

    def _setup_proxies(self) -> None:
        """Setup proxy rotation from environment variable."""
        proxy_env = os.environ.get(PROXIES_ENV_VAR, "")
        if proxy_env:
            self.proxies = [proxy.strip() for proxy in proxy_env.split(",") if proxy.strip()]
            logger.info("Proxy rotation enabled", proxy_count=len(self.proxies))

    def _get_next_proxy(self, url: str) -> Optional[str]:
        """Get next proxy for URL with scheme matching."""
        if not self.proxies:
            return None

        url_scheme = urlparse(url).scheme
        for _ in range(len(self.proxies)):
            proxy = self.proxies[self._proxy_index % len(self.proxies)]
            self._proxy_index += 1
            if urlparse(proxy).scheme == url_scheme:
                return proxy

        # If no matching scheme found, return first proxy
        return self.proxies[0]

    @property
    def is_initialized(self) -> bool:
        return self.session is not None

    async def initialize(self) -> None:
        """Initialize the HTTP client session."""
        if self.session is None:
            timeout = aiohttp.ClientTimeout(total=self.http_config.timeout)
            self.session = aiohttp.ClientSession(timeout=timeout)
            logger.debug("HTTP client session initialized")

    async def close(self) -> None:
        """Close the HTTP client and clean up resources."""
        if self.session:
            await self.session.close()
            self.session = None
            logger.debug("HTTP client closed")

    async def __aenter__(self) -> "HttpClient":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def get(
        self,
        url: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
        allow_redirects: bool = True,
    ) -> FetchResponse:
        """
        Fetch a URL once. No retries are attempted.

        Args:
            url: URL to fetch
            headers: Request headers
            timeout: Deadline in seconds for the whole exchange (None = config default)
            allow_redirects: Follow 3xx responses

        Returns:
            FetchResponse with status, lower-cased headers and decoded body

        Raises:
            FetchTimeout: The deadline passed before the body was read
            aiohttp.ClientError: Connection-level failures
        """
        if self.session is None:
            raise RuntimeError("HTTP client not initialized. Call initialize() first.")

        deadline = timeout if timeout is not None else self.http_config.timeout
        proxy = self._get_next_proxy(url)
        start_time = time.time()

        try:
            async with asyncio.timeout(deadline):
                async with self.session.get(
                    url,
                    headers=headers,
                    allow_redirects=allow_redirects,
                    proxy=proxy,
                ) as response:
                    text = await response.text(errors="replace")
                    status = response.status
                    response_headers = {name.lower(): value for name, value in response.headers.items()}
        except asyncio.TimeoutError as e:
            logger.warning("Request timed out", url=url, timeout=deadline)
            record_failure(FetchTimeout.kind.value)
            raise FetchTimeout(url, deadline) from e

        end_time = time.time()
        METRICS["fetch_latency_seconds"].observe(end_time - start_time)
        METRICS["fetch_responses_total"].labels(status_class=f"{status // 100}xx").inc()

        logger.debug("Fetched", url=url, status=status, bytes=len(text), elapsed=round(end_time - start_time, 3))

        return FetchResponse(
            status=status,
            headers=response_headers,
            text=text,
        )
