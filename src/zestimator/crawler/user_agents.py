"""
User agent rotation and browser-like request headers.

Listing pages are served to ordinary browsers, so every request carries a
realistic desktop browser fingerprint instead of a crawler identity.
"""

from __future__ import annotations

import os
import random
from typing import Dict, Optional
from urllib.parse import quote_plus

from ..config.config import HttpConfig

USER_AGENT_ENV_VAR = "UA"
DEFAULT_REFERER = "https://www.google.com/"


class UserAgentRotator:
    """Picks a realistic desktop browser user agent for each request."""

    def __init__(self) -> None:
        # Most common browsers first
        self.desktop_agents = [
            # Chrome
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/130.0.0.0 Safari/537.36",
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/130.0.0.0 Safari/537.36",
            "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/130.0.0.0 Safari/537.36",
            # Firefox
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:131.0) Gecko/20100101 Firefox/131.0",
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10.15; rv:131.0) Gecko/20100101 Firefox/131.0",
            # Safari
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/18.0 Safari/605.1.15",
            # Edge
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/130.0.0.0 Safari/537.36 Edg/130.0.0.0",
        ]

    def get_random_user_agent(self) -> str:
        return random.choice(self.desktop_agents)


def resolve_user_agent(config: HttpConfig, rotator: Optional[UserAgentRotator] = None) -> str:
    """Config override first, then the ``UA`` environment variable, then the rotation."""
    if config.user_agent:
        return config.user_agent
    env_agent = os.environ.get(USER_AGENT_ENV_VAR)
    if env_agent:
        return env_agent
    return (rotator or UserAgentRotator()).get_random_user_agent()


def referer_for(query: Optional[str]) -> str:
    """A Google search referer for ``query``, or the bare Google origin."""
    if not query:
        return DEFAULT_REFERER
    return f"{DEFAULT_REFERER}search?q={quote_plus(query)}"


def build_headers(
    config: HttpConfig,
    referer_query: Optional[str] = None,
    rotator: Optional[UserAgentRotator] = None,
) -> Dict[str, str]:
    """
    Build the header set for a listing-site request.

    Args:
        config: HTTP settings (user agent override, Accept headers)
        referer_query: Search phrase to put in the Google referer
        rotator: User agent pool to draw from

    Returns:
        Header mapping for aiohttp
    """
    return {
        "User-Agent": resolve_user_agent(config, rotator),
        "Accept": config.accept,
        "Accept-Language": config.accept_language,
        "Referer": referer_for(referer_query),
        "Connection": "keep-alive",
    }
