"""
Reddit search as an Atom feed.

The feed has no score or comment counts, so those fields are always 0.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

import httpx

from feedboard.core.config import settings
from feedboard.services.ingest.dedupe import make_id
from feedboard.services.ingest.fetch import fetch_text
from feedboard.services.ingest.items import RedditItem
from feedboard.services.ingest.markup import extract_attr, extract_tag_text, iter_blocks
from feedboard.services.ingest.normalize import decode_entities, parse_timestamp
from feedboard.services.ingest.recency import is_within_window, utc_now

log = logging.getLogger(__name__)

NAMESPACE = "reddit"
DEFAULT_SUBREDDIT = "reddit"


def normalize_subreddit(name: str | None) -> str:
    name = (name or "").strip() or DEFAULT_SUBREDDIT
    return name if name.startswith("r/") else f"r/{name}"


def parse_reddit_feed(
    xml: str,
    window_hours: float,
    now: datetime | None = None,
    limit: int | None = None,
) -> list[RedditItem]:
    now = now or utc_now()
    limit = settings.max_items if limit is None else limit
    items: list[RedditItem] = []

    for block in iter_blocks(xml, "entry"):
        if len(items) >= limit:
            break

        title = extract_tag_text(block, "title")
        link = extract_attr(block, "link", "href")
        if not title or not link:
            log.debug("Skipping reddit entry without title or link")
            continue
        link = decode_entities(link)

        raw_date = extract_tag_text(block, "updated") or extract_tag_text(block, "published")
        published_at = parse_timestamp(raw_date, now).isoformat()
        if not is_within_window(published_at, window_hours, lambda: now):
            continue

        native_id = extract_tag_text(block, "id")
        items.append(
            RedditItem(
                id=native_id or make_id(NAMESPACE, link),
                title=decode_entities(title),
                subreddit=normalize_subreddit(extract_attr(block, "category", "term")),
                url=link,
                published_at=published_at,
            )
        )

    return items


async def fetch_reddit(
    keyword: str,
    window_hours: float,
    *,
    client: httpx.AsyncClient | None = None,
    now_fn: Callable[[], datetime] | None = None,
) -> list[RedditItem]:
    xml = await fetch_text(
        settings.reddit_rss_url,
        source=NAMESPACE,
        params={"q": keyword, "sort": "new", "limit": settings.max_items},
        accept="application/atom+xml, application/xml;q=0.9, */*;q=0.8",
        client=client,
    )
    items = parse_reddit_feed(xml, window_hours, now=(now_fn or utc_now)())
    log.info("Reddit: %d items for %r within %sh", len(items), keyword, window_hours)
    return items
