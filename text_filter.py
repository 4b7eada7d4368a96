"""Accent-insensitive label filtering for pickers and search fields."""

from __future__ import annotations

import re
import unicodedata

_COMBINING_RE = re.compile(r"[\u0300-\u036f]")


def normalize_label(text: str) -> str:
    """NFD-decompose, drop diacritics and case-fold."""
    return _COMBINING_RE.sub("", unicodedata.normalize("NFD", text)).casefold()


def prefix_then_fuzzy_filter(value: str, search: str) -> bool:
    """Match a label against a search string.

    One or two characters must match the start of the label; three or more
    may appear anywhere in it. An empty search matches everything.
    """
    v = normalize_label(value)
    s = normalize_label(search.strip())

    if not s:
        return True
    if len(s) <= 2:
        return v.startswith(s)
    return s in v
