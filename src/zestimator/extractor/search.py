"""
Schema-free search over decoded JSON trees.

All searches share one traversal: a depth-first pre-order walk in which a
mapping's own keys are inspected before any of its values are entered, and
lists are walked element by element. The first hit in that order wins, which
is not necessarily the globally shallowest one.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterator, Optional, Sequence, Tuple, Type, Union

from .models import Number
from .normalize import normalize_number

# "zestimate" beats "price" on the same node
VALUATION_KEYS: Tuple[str, ...] = ("zestimate", "price")

STREET_KEYS = frozenset({"streetaddress", "addressline1", "line1"})
CITY_KEYS = frozenset({"addresslocality", "city"})
REGION_KEYS = frozenset({"addressregion", "state"})
POSTAL_KEYS = frozenset({"postalcode", "zipcode", "zip"})


def iter_objects(tree: Any) -> Iterator[Dict[str, Any]]:
    """Yield every mapping in ``tree`` in pre-order."""
    # Explicit stack: page payloads can nest deeper than the recursion limit allows
    stack = [tree]
    while stack:
        node = stack.pop()
        if isinstance(node, dict):
            yield node
            children = list(node.values())
        elif isinstance(node, list):
            children = node
        else:
            continue
        stack.extend(reversed(children))


def iter_values_by_keys(tree: Any, keys: Sequence[str], case_insensitive: bool = False) -> Iterator[Any]:
    """
    Yield values stored under any of ``keys``, walking ``tree`` in pre-order.

    Within a single mapping, values are yielded in the priority order of
    ``keys`` rather than the mapping's own order.
    """
    if case_insensitive:
        wanted = [key.lower() for key in keys]
        for node in iter_objects(tree):
            folded: Dict[str, str] = {}
            for name in node:
                folded.setdefault(name.lower(), name)
            for key in wanted:
                if key in folded:
                    yield node[folded[key]]
    else:
        for node in iter_objects(tree):
            for key in keys:
                if key in node:
                    yield node[key]


def find_by_keys(
    tree: Any,
    keys: Sequence[str],
    case_insensitive: bool = False,
    value_type: Optional[Union[Type[Any], Tuple[Type[Any], ...]]] = None,
) -> Any:
    """Return the first value under one of ``keys``, optionally restricted to ``value_type``."""
    for value in iter_values_by_keys(tree, keys, case_insensitive):
        if value_type is None or isinstance(value, value_type):
            return value
    return None


def find_by_shape(tree: Any, predicate: Callable[[Dict[str, Any]], bool]) -> Optional[Dict[str, Any]]:
    """Return the first mapping, in pre-order, for which ``predicate`` holds."""
    for node in iter_objects(tree):
        if predicate(node):
            return node
    return None


def find_valuation(tree: Any) -> Optional[Number]:
    """
    Find the first ``zestimate``/``price`` value that normalizes to a number.

    A key whose value cannot be normalized does not end the search.
    """
    for raw in iter_values_by_keys(tree, VALUATION_KEYS):
        value = normalize_number(raw)
        if value is not None:
            return value
    return None


def looks_like_address_object(node: Dict[str, Any]) -> bool:
    """True when a mapping carries a street key plus enough locality keys."""
    names = {name.lower() for name in node}
    has_street = bool(names & STREET_KEYS)
    if not has_street:
        return False

    has_city = bool(names & CITY_KEYS)
    has_region = bool(names & REGION_KEYS)
    has_postal = bool(names & POSTAL_KEYS)

    if has_city and has_region and has_postal:
        return True
    return (has_city or has_region) and (has_postal or has_region)


def dig(obj: Any, path: Sequence[str]) -> Any:
    """Follow ``path`` through nested mappings, returning None on any miss."""
    current = obj
    for key in path:
        if not isinstance(current, dict) or key not in current:
            return None
        current = current[key]
    return current
