"""Username and list type normalization.

- normalize_username: strip one leading "@", trim, lowercase
- is_list_type: membership check for the two fixed lists
- escape_like: make a search term safe for a LIKE pattern
"""

from __future__ import annotations

from typing import Any

LIST_TYPES: tuple[str, ...] = ("following", "followers")

LIKE_ESCAPE = "\\"


def normalize_username(raw: Any) -> str:
    """Normalize a username for storage and comparison.

    Non-string input is stringified first, so bulk payloads holding
    numbers still produce a usable handle. Whitespace is trimmed on both
    sides of the "@", so " @foo" yields "foo" rather than "@foo".

    Args:
        raw: Username as typed by the user (e.g. "@Foo ").

    Returns:
        Lowercased handle without the leading "@" and surrounding
        whitespace. May be empty; callers decide whether that is an error.
    """
    if raw is None:
        return ""
    text = (raw if isinstance(raw, str) else str(raw)).strip()
    if text.startswith("@"):
        text = text[1:]
    return text.strip().lower()


def is_list_type(value: Any) -> bool:
    """Return True if value names one of the two lists."""
    return isinstance(value, str) and value in LIST_TYPES


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term matches literally."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
