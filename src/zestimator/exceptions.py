"""
Failure kinds surfaced by Zestimator.

Only the transport layer and the terminal states of the extraction engine raise.
Component-local decode and search failures are reported as ``None`` so the
engine can move on to the next data source.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class FailureKind(str, Enum):
    """Stable identifiers for every user-visible failure."""

    ADDRESS_RESOLUTION_FAILED = "address_resolution_failed"
    EMPTY_RESPONSE = "empty_response"
    BOT_BLOCK_DETECTED = "bot_block_detected"
    HTTP_STATUS_ERROR = "http_status_error"
    TIMEOUT = "timeout"
    VALUATION_EXTRACTION_FAILED = "valuation_extraction_failed"
    DECODE_FAILED = "decode_failed"


class ZestimatorError(Exception):
    """Base class for all Zestimator failures."""

    kind: FailureKind


class AddressResolutionFailed(ZestimatorError):
    """Raised when neither a redirect nor a home details link was found for an address."""

    kind = FailureKind.ADDRESS_RESOLUTION_FAILED

    def __init__(self, address: str) -> None:
        super().__init__(f"Failed to convert address to Zillow URL: {address!r}")
        self.address = address


class EmptyResponse(ZestimatorError):
    """Raised when a fetch returned a zero-length body."""

    kind = FailureKind.EMPTY_RESPONSE

    def __init__(self, url: Optional[str] = None) -> None:
        message = "Fetched empty HTML."
        if url:
            message = f"Fetched empty HTML from {url}."
        super().__init__(message)
        self.url = url


class BotBlockDetected(ZestimatorError):
    """Raised when the page is a bot-check page instead of a listing."""

    kind = FailureKind.BOT_BLOCK_DETECTED

    def __init__(self, signature: str) -> None:
        super().__init__(f"Fetched a bot-check page, not the listing HTML (matched {signature!r}).")
        self.signature = signature


class HttpStatusError(ZestimatorError):
    """Raised when the response status was not the expected success code."""

    kind = FailureKind.HTTP_STATUS_ERROR

    def __init__(self, status: int, url: str) -> None:
        super().__init__(f"HTTP {status} from Zillow ({url}).")
        self.status = status
        self.url = url


class FetchTimeout(ZestimatorError):
    """Raised when a network operation exceeded its deadline."""

    kind = FailureKind.TIMEOUT

    def __init__(self, url: str, timeout: float) -> None:
        super().__init__(f"Timed out fetching {url} after {timeout}s.")
        self.url = url
        self.timeout = timeout


class ValuationExtractionFailed(ZestimatorError):
    """Raised when every data source and the regex fallback came up empty."""

    kind = FailureKind.VALUATION_EXTRACTION_FAILED

    def __init__(self, message: str = "Failed to extract zestimate.") -> None:
        super().__init__(message)


class DecodeFailed(ZestimatorError):
    """Raised when a blob the caller insists on could not be decoded."""

    kind = FailureKind.DECODE_FAILED

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to decode JSON: {reason}")
        self.reason = reason
