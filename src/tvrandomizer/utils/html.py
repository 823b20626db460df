"""Plain-text helpers for provider HTML summaries."""

from __future__ import annotations

import html
import re

_BREAK_PATTERN = re.compile(r"<br\s*/?>|</p>", re.IGNORECASE)
_TAG_PATTERN = re.compile(r"<[^>]*>")
_WHITESPACE_PATTERN = re.compile(r"\s+")


def decode_html_entities(value: str | None) -> str:
    """Decode named and numeric HTML entities (``&amp;``, ``&#39;``, ...)."""

    if not value:
        return ""
    return html.unescape(value).replace("\xa0", " ")


def strip_html(value: str | None) -> str:
    """Remove tags, decode entities and collapse whitespace."""

    if not value:
        return ""
    spaced = _BREAK_PATTERN.sub(" ", value)
    no_tags = _TAG_PATTERN.sub(" ", spaced)
    return _WHITESPACE_PATTERN.sub(" ", decode_html_entities(no_tags)).strip()


def normalize_text(value: str | None) -> str:
    """Collapse whitespace and case-fold for comparisons."""

    return _WHITESPACE_PATTERN.sub(" ", value or "").strip().casefold()
