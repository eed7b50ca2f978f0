"""
Zestimator Crawler Module - HTTP transport for listing pages

Issues single GET requests with browser-like headers, a hard deadline per
request, and optional proxy rotation from the environment.
"""

from .http_client import FetchResponse, HttpClient
from .user_agents import UserAgentRotator, build_headers

__all__ = [
    "FetchResponse",
    "HttpClient",
    "UserAgentRotator",
    "build_headers",
]
