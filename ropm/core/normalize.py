"""
Field normalization helpers.

The submission format lets any field appear once or many times and leaves
absent fields out entirely. These helpers reconcile that looseness before
the record reaches the section builders, and clean the assembled document
tree before it reaches the renderer.
"""

import re
import unicodedata
from typing import Any, List

_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def to_list(value: Any) -> List[Any]:
    """
    Normalize a field that may be absent, scalar or repeated.

    Args:
        value: None, a scalar, or a list/tuple

    Returns:
        [] for None, [value] for a scalar, the same elements otherwise
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def value_at(values: List[Any], index: int) -> Any:
    """Return values[index], or "" when the index is missing or the value falsy."""
    if index < len(values) and values[index]:
        return values[index]
    return ""


def sanitize_tree(node: Any) -> Any:
    """
    Recursively drop None from lists and None-valued keys from dicts.

    Returns a new tree with the same shape; surviving elements keep their
    order and values, nothing is deduplicated, scalars are returned as is.
    """
    if isinstance(node, list):
        return [sanitize_tree(item) for item in node if item is not None]
    if isinstance(node, dict):
        return {
            key: sanitize_tree(item)
            for key, item in node.items()
            if item is not None
        }
    return node


def format_date(value: Any) -> str:
    """
    Rewrite an ISO date (YYYY-MM-DD) as DD/MM/YYYY.

    Absent values give "". Anything that is not an ISO date is returned
    unchanged; no validation happens here.
    """
    if not value:
        return ""
    text = str(value)
    match = _ISO_DATE.match(text.strip())
    if not match:
        return text
    year, month, day = match.groups()
    return f"{day}/{month}/{year}"


def strip_accents(text: str) -> str:
    """Remove combining diacritics: 'VÍTIMA' -> 'VITIMA'."""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))
