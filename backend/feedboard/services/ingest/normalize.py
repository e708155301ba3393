from __future__ import annotations
from datetime import datetime, timezone
from dateutil import parser as dtparse
from urllib.parse import urlparse
import re

ENTITIES = {
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
    "&apos;": "'",
}

# One pass over the text, so "&amp;lt;" decodes to "&lt;" and stops there
_ENTITY_RE = re.compile("|".join(re.escape(e) for e in ENTITIES))


def decode_entities(text: str) -> str:
    if not text:
        return text
    return _ENTITY_RE.sub(lambda m: ENTITIES[m.group(0)], text)


def extract_domain(url: str) -> str:
    """Hostname of ``url`` without a leading ``www.``, or ``"unknown"``."""
    try:
        host = urlparse(url).hostname
    except ValueError:
        host = None
    if not host:
        return "unknown"
    return host[4:] if host.startswith("www.") else host


def as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_timestamp(raw: str | None, now: datetime) -> datetime:
    """
    Best-effort parse of an RSS (RFC 822) or Atom (ISO-8601) timestamp.

    Falls back to ``now`` when the value is missing or unreadable, so callers
    always get an aware UTC datetime.
    """
    if not raw or not raw.strip():
        return as_utc(now)
    try:
        return as_utc(dtparse.parse(raw.strip()))
    except (dtparse.ParserError, ValueError, OverflowError):
        return as_utc(now)
