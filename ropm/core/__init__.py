"""Core record handling for ROPM report generation.

This package normalizes loosely structured submissions. Record intake lives
in ropm.core.intake and is imported from there directly.
"""

from ropm.core.normalize import (
    format_date,
    sanitize_tree,
    strip_accents,
    to_list,
    value_at,
)

__all__ = [
    "format_date",
    "sanitize_tree",
    "strip_accents",
    "to_list",
    "value_at",
]
