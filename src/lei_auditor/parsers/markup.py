"""Plain-text projection of editor markup."""

from __future__ import annotations

import html
import re

_TAG_RE = re.compile(r"<[^>]*>")


def strip_markup(content: str) -> str:
    """Drop markup tags and decode HTML entities.

    Offsets of term alerts and the character count are computed on this
    projection, never on the markup itself.
    """
    if not content:
        return ""
    return html.unescape(_TAG_RE.sub("", content))


def character_count(content: str) -> int:
    """Number of characters in the plain-text projection of ``content``."""
    return len(strip_markup(content))
