from __future__ import annotations

from dataclasses import dataclass


@dataclass
class NewsItem:
    """A Google News RSS item"""
    id: str
    title: str
    source_label: str
    url: str
    published_at: str  # ISO-8601
    thumbnail: str | None = None

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "title": self.title,
            "sourceLabel": self.source_label,
            "url": self.url,
            "publishedAt": self.published_at,
        }
        if self.thumbnail:
            data["thumbnail"] = self.thumbnail
        return data


@dataclass
class RedditItem:
    """A Reddit search result from the Atom feed"""
    id: str
    title: str
    subreddit: str  # r/<name>
    url: str
    published_at: str  # ISO-8601
    # The Atom feed carries neither, they stay 0
    score: int = 0
    comments_count: int = 0

    @property
    def source_label(self) -> str:
        return self.subreddit

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "sourceLabel": self.source_label,
            "subreddit": self.subreddit,
            "url": self.url,
            "publishedAt": self.published_at,
            "score": self.score,
            "commentsCount": self.comments_count,
        }
