"""
Google News RSS search feed.

Each ``<item>`` becomes a :class:`NewsItem`. Feed order (newest first
upstream) is kept and the output is capped at ``settings.max_items``.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Callable
from urllib.parse import urlparse

import httpx

from feedboard.core.config import settings
from feedboard.services.ingest.dedupe import make_id
from feedboard.services.ingest.fetch import fetch_text
from feedboard.services.ingest.items import NewsItem
from feedboard.services.ingest.markup import extract_attr, extract_tag_text, iter_blocks
from feedboard.services.ingest.normalize import decode_entities, extract_domain, parse_timestamp
from feedboard.services.ingest.recency import is_within_window, utc_now

log = logging.getLogger(__name__)

NAMESPACE = "news"

# (tag, attribute) pairs tried in order before looking inside the description
THUMBNAIL_ATTRS = (
    ("media:content", "url"),
    ("media:thumbnail", "url"),
    ("enclosure", "url"),
)

# Image URLs inside the (decoded) description, first match wins
DESCRIPTION_IMAGE_PATTERNS = (
    re.compile(r"<img\b[^>]*?\ssrc\s*=\s*[\"']([^\"']+)[\"']", re.IGNORECASE),
    re.compile(r"<img\b[^>]*?\sdata-src\s*=\s*[\"']([^\"']+)[\"']", re.IGNORECASE),
    re.compile(
        r"((?:https?:)?//[^\s\"'<>]+?\.(?:jpe?g|png|gif|webp)(?:\?[^\s\"'<>]*)?)(?=[\s\"'<>]|$)",
        re.IGNORECASE,
    ),
)


def absolute_image_url(url: str | None) -> str | None:
    if not url:
        return None
    url = url.strip()
    if url.startswith("//"):
        url = "https:" + url
    parsed = urlparse(url)
    if parsed.scheme in ("http", "https") and parsed.netloc:
        return url
    return None


def extract_thumbnail(block: str) -> str | None:
    for tag, attr in THUMBNAIL_ATTRS:
        url = absolute_image_url(decode_entities(extract_attr(block, tag, attr) or ""))
        if url:
            return url

    description = extract_tag_text(block, "description")
    if not description:
        return None
    description = decode_entities(description)
    for pattern in DESCRIPTION_IMAGE_PATTERNS:
        match = pattern.search(description)
        url = absolute_image_url(decode_entities(match.group(1))) if match else None
        if url:
            return url
    return None


def parse_news_feed(
    xml: str,
    window_hours: float,
    now: datetime | None = None,
    limit: int | None = None,
) -> list[NewsItem]:
    now = now or utc_now()
    limit = settings.max_items if limit is None else limit
    items: list[NewsItem] = []

    for block in iter_blocks(xml, "item"):
        if len(items) >= limit:
            break

        title = extract_tag_text(block, "title")
        link = extract_tag_text(block, "link")
        if not title or not link:
            log.debug("Skipping news item without title or link")
            continue
        link = decode_entities(link)

        published_at = parse_timestamp(extract_tag_text(block, "pubDate"), now).isoformat()
        if not is_within_window(published_at, window_hours, lambda: now):
            continue

        source = extract_tag_text(block, "source")
        items.append(
            NewsItem(
                id=make_id(NAMESPACE, link),
                title=decode_entities(title),
                source_label=decode_entities(source) if source else extract_domain(link),
                url=link,
                published_at=published_at,
                thumbnail=extract_thumbnail(block),
            )
        )

    return items


async def fetch_news(
    keyword: str,
    window_hours: float,
    *,
    client: httpx.AsyncClient | None = None,
    now_fn: Callable[[], datetime] | None = None,
) -> list[NewsItem]:
    xml = await fetch_text(
        settings.news_rss_url,
        source=NAMESPACE,
        params={"q": keyword, "hl": "en"},
        accept="application/rss+xml, application/xml;q=0.9, */*;q=0.8",
        client=client,
    )
    items = parse_news_feed(xml, window_hours, now=(now_fn or utc_now)())
    log.info("News: %d items for %r within %sh", len(items), keyword, window_hours)
    return items
