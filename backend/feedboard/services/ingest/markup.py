"""
Regex-based extraction for RSS/Atom fragments.

Upstream feeds are treated as loosely structured text: no schema is assumed
and no XML parser is involved. Tag matching is case-insensitive and the first
occurrence of a tag wins, except that a CDATA-wrapped value anywhere in the
fragment takes precedence over plain inner content.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterator


@lru_cache(maxsize=64)
def _patterns(tag: str) -> tuple[re.Pattern, re.Pattern, re.Pattern]:
    name = re.escape(tag)
    # "(?<!/)>" keeps self-closing tags (<link href="..."/>) out of text matches
    opening = rf"<{name}(?:\s[^>]*)?(?<!/)>"
    closing = rf"</{name}\s*>"
    cdata = re.compile(
        rf"{opening}\s*<!\[CDATA\[(.*?)\]\]>\s*{closing}", re.IGNORECASE | re.DOTALL
    )
    plain = re.compile(rf"{opening}(.*?){closing}", re.IGNORECASE | re.DOTALL)
    start = re.compile(rf"<{name}(?=[\s/>])([^>]*)>", re.IGNORECASE)
    return cdata, plain, start


def extract_tag_text(fragment: str, tag: str) -> str | None:
    """Trimmed inner text of the first ``tag``, CDATA form first."""
    if not fragment:
        return None
    cdata, plain, _ = _patterns(tag)

    match = cdata.search(fragment) or plain.search(fragment)
    if not match:
        return None
    return match.group(1).strip()


def extract_attr(fragment: str, tag: str, attr: str) -> str | None:
    """Value of ``attr`` on the first ``tag`` (self-closing or not)."""
    if not fragment:
        return None
    _, _, start = _patterns(tag)

    match = start.search(fragment)
    if not match:
        return None

    attr_match = re.search(
        rf"(?:^|\s){re.escape(attr)}\s*=\s*(?:\"([^\"]*)\"|'([^']*)')",
        match.group(1),
        re.IGNORECASE,
    )
    if not attr_match:
        return None
    value = (attr_match.group(1) if attr_match.group(1) is not None else attr_match.group(2)).strip()
    return value or None


def iter_blocks(document: str, tag: str) -> Iterator[str]:
    """Inner markup of every ``<tag>...</tag>`` block, in document order."""
    if not document:
        return
    _, plain, _ = _patterns(tag)
    for match in plain.finditer(document):
        yield match.group(1)
