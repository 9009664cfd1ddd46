"""
ROPM Generator - Text Utilities

Utilities for text processing in report generation.
"""

from typing import Any


def upper(value: Any) -> str:
    """Display form of a field value: upper-cased, "" when absent."""
    if not value:
        return ""
    return str(value).upper()


def escape_markup(text: str) -> str:
    """
    Make free text safe for a ReportLab Paragraph.

    Paragraph accepts a subset of HTML, so XML special characters must be
    escaped and line breaks turned into <br/> tags. Control characters other
    than newline and tab are dropped.

    Args:
        text: Raw text as typed by the user

    Returns:
        Markup-safe text
    """
    if not text:
        return ""

    # Normalize line endings first so \r\n gives a single break
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = "".join(ch for ch in text if ch in "\n\t" or ord(ch) >= 32)

    # Escape & first so the entities below are not double-escaped
    text = text.replace("&", "&amp;")
    text = text.replace("<", "&lt;")
    text = text.replace(">", "&gt;")

    text = text.replace("\t", "    ")
    return text.replace("\n", "<br/>")
