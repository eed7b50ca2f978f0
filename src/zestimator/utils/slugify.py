"""
Address slugification for listing-site search URLs.

Converts a free-form street address into the dash-separated form the search
endpoint expects, e.g. ``"123 Main St #4, Springfield, IL"`` becomes
``"123-Main-St-4-Springfield-IL"``.
"""

import re

# Anything that is not a word character, whitespace or hyphen
PUNCTUATION_PATTERN = re.compile(r"[^\w\s-]")

WHITESPACE_PATTERN = re.compile(r"\s+")


def address_slug(address: str) -> str:
    """
    Convert an address to a search slug.

    Unit markers (``#``) are dropped, other punctuation becomes a separator,
    runs of whitespace collapse into a single ``-``. Case is preserved.

    Examples:
        >>> address_slug("123 Main St, Springfield, IL 62704")
        '123-Main-St-Springfield-IL-62704'

        >>> address_slug("  45 Elm Ave #2B ")
        '45-Elm-Ave-2B'

        >>> address_slug("")
        ''
    """
    result = address.replace("#", "")
    result = PUNCTUATION_PATTERN.sub(" ", result)
    result = WHITESPACE_PATTERN.sub("-", result.strip())
    return result.strip("-")
