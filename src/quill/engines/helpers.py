"""Comparison helpers registered as template globals.

Kida's expression language already compares natively; these exist so
markup ported from block-helper templates keeps working unchanged::

    {% if contains(tags, "draft") %}<span class="badge">Draft</span>{% end %}
    {% if gte(count, 10) %}many{% end %}
"""

from typing import Any


def and_(a: Any, b: Any) -> bool:
    return bool(a and b)


def or_(a: Any, b: Any) -> bool:
    return bool(a or b)


def contains(haystack: Any, needle: Any) -> bool:
    """Membership test that tolerates a missing haystack."""
    if haystack is None:
        return False
    return needle in haystack


def gt(a: Any, b: Any) -> bool:
    return a > b


def gte(a: Any, b: Any) -> bool:
    return a >= b


def lt(a: Any, b: Any) -> bool:
    return a < b


def lte(a: Any, b: Any) -> bool:
    return a <= b


def is_(a: Any, b: Any) -> bool:
    return a == b


def isnt(a: Any, b: Any) -> bool:
    return a != b


BUILTIN_HELPERS: dict[str, Any] = {
    "and_": and_,
    "contains": contains,
    "gt": gt,
    "gte": gte,
    "is_": is_,
    "isnt": isnt,
    "lt": lt,
    "lte": lte,
    "or_": or_,
}
