from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable

from feedboard.core.errors import AggregationFailed
from feedboard.services.ingest import news, reddit
from feedboard.services.ingest.items import NewsItem, RedditItem

log = logging.getLogger(__name__)

Fetcher = Callable[[str, float], Awaitable[list]]


@dataclass
class AggregateResult:
    news_items: list[NewsItem] = field(default_factory=list)
    reddit_items: list[RedditItem] = field(default_factory=list)
    partial_error: str | None = None

    def to_dict(self) -> dict:
        data = {
            "newsItems": [i.to_dict() for i in self.news_items],
            "redditItems": [i.to_dict() for i in self.reddit_items],
        }
        if self.partial_error:
            data["partialError"] = self.partial_error
        return data


async def aggregate(
    keyword: str,
    window_hours: float,
    *,
    news_fetcher: Fetcher | None = None,
    reddit_fetcher: Fetcher | None = None,
) -> AggregateResult:
    """
    Fetch both sources for ``keyword`` concurrently.

    A failing source contributes an empty list and a ``partial_error`` note;
    only when both fail is :class:`AggregationFailed` raised. Lists are
    returned as the parsers produced them (no cross-source merge or sort).
    """
    news_fetcher = news_fetcher or news.fetch_news
    reddit_fetcher = reddit_fetcher or reddit.fetch_reddit

    results = await asyncio.gather(
        news_fetcher(keyword, window_hours),
        reddit_fetcher(keyword, window_hours),
        return_exceptions=True,
    )

    lists: dict[str, list] = {}
    errors: dict[str, Exception] = {}
    for name, result in zip(("news", "reddit"), results):
        if isinstance(result, BaseException):
            if not isinstance(result, Exception):
                raise result
            log.error("Aggregation: %s failed for %r: %s", name, keyword, result)
            errors[name] = result
            lists[name] = []
        else:
            lists[name] = result

    if len(errors) == len(results):
        raise AggregationFailed(errors)

    partial_error = None
    if errors:
        partial_error = "; ".join(f"{name} unavailable: {err}" for name, err in errors.items())

    return AggregateResult(
        news_items=lists["news"],
        reddit_items=lists["reddit"],
        partial_error=partial_error,
    )
