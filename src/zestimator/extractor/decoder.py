"""
Resilient JSON decoding for embedded data islands.

Listing pages embed the same data several ways: plain JSON, JSON encoded a
second time as a JSON string, JSON wrapped in an HTML comment, and JSON with
HTML-escaped quotes. Everything here returns ``None`` (or ``[]``) on failure;
``decode_strict`` is the only function that raises.
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, List, Optional

import structlog

from ..exceptions import DecodeFailed

logger = structlog.get_logger(__name__)

COMMENT_OPEN_PATTERN = re.compile(r"^\s*<!--")
COMMENT_CLOSE_PATTERN = re.compile(r"-->\s*$")

# json.loads raises RecursionError on pathologically nested input.
_DECODE_ERRORS = (ValueError, RecursionError)


def _loads_unwrapped(raw: str) -> Any:
    """Parse ``raw``, parsing once more if the result is itself a JSON string."""
    value = json.loads(raw)
    if isinstance(value, str):
        value = json.loads(value)
    return value


def _as_object(value: Any) -> Optional[Dict[str, Any]]:
    if isinstance(value, dict):
        return value
    if isinstance(value, list) and value and isinstance(value[0], dict):
        # Seen in the wild on a few pages, take the first object
        return value[0]
    return None


def strip_comment_wrapper(raw: str) -> str:
    """Remove a leading ``<!--`` and trailing ``-->`` together with surrounding whitespace."""
    return COMMENT_CLOSE_PATTERN.sub("", COMMENT_OPEN_PATTERN.sub("", raw)).strip()


def _recover(raw: str) -> str:
    return strip_comment_wrapper(raw).replace("&quot;", '"')


def _decode(raw: str) -> Dict[str, Any]:
    try:
        value = _loads_unwrapped(raw)
    except _DECODE_ERRORS:
        value = _loads_unwrapped(_recover(raw))

    obj = _as_object(value)
    if obj is None:
        raise ValueError(f"decoded value is {type(value).__name__}, not an object")
    return obj


def decode(raw: str) -> Optional[Dict[str, Any]]:
    """
    Decode a raw blob into a JSON object.

    Args:
        raw: Text of the blob, possibly double encoded or comment wrapped

    Returns:
        The decoded object, or None if the blob does not decode to one
    """
    try:
        return _decode(raw)
    except _DECODE_ERRORS as e:
        logger.debug("Discarding undecodable blob", error=str(e), length=len(raw))
        return None


def decode_strict(raw: str) -> Dict[str, Any]:
    """Like :func:`decode` but raises :class:`DecodeFailed` instead of returning None."""
    try:
        return _decode(raw)
    except _DECODE_ERRORS as e:
        raise DecodeFailed(str(e)) from e


def decode_all(raw: str) -> List[Dict[str, Any]]:
    """Decode a blob that may hold one object or an array of objects (JSON-LD)."""
    try:
        value = json.loads(raw)
    except _DECODE_ERRORS as e:
        logger.debug("Invalid JSON-LD", error=str(e))
        return []

    if isinstance(value, dict):
        return [value]
    if isinstance(value, list):
        return [item for item in value if isinstance(item, dict)]
    return []
