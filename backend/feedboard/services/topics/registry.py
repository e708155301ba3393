from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from feedboard.core.config import settings
from feedboard.core.errors import Duplicate, InvalidKeyword, LimitReached, NotFound
from feedboard.db.models import Topic, utcnow

log = logging.getLogger(__name__)

MAX_KEYWORD_LENGTH = 255


def clean_keyword(keyword) -> str:
    if not isinstance(keyword, str) or not keyword:
        raise InvalidKeyword("Keyword is required")
    trimmed = keyword.strip()
    if not 0 < len(trimmed) <= MAX_KEYWORD_LENGTH:
        raise InvalidKeyword(f"Keyword must be 1-{MAX_KEYWORD_LENGTH} characters")
    return trimmed


class TopicRegistry:
    """
    CRUD over the ``topics`` table.

    Keywords are unique ignoring case and at most ``limit`` topics may exist.
    Every mutating call commits its own transaction.
    """

    def __init__(self, db: Session, limit: int | None = None):
        self.db = db
        self.limit = settings.topic_limit if limit is None else limit

    def list(self) -> list[Topic]:
        return list(
            self.db.execute(
                select(Topic).order_by(Topic.created_at.desc(), Topic.id.desc())
            ).scalars().all()
        )

    def get(self, topic_id: int) -> Topic:
        topic = self.db.get(Topic, topic_id)
        if not topic:
            raise NotFound("Topic not found")
        return topic

    def create(self, keyword) -> Topic:
        keyword = clean_keyword(keyword)

        existing = self.db.execute(select(Topic)).scalars().all()
        if len(existing) >= self.limit:
            raise LimitReached(f"Maximum {self.limit} topics allowed")
        if self._is_taken(keyword, existing):
            raise Duplicate("Topic already exists")

        topic = Topic(keyword=keyword)
        self.db.add(topic)
        self._commit()
        self.db.refresh(topic)
        log.info("Created topic %s (%r)", topic.id, topic.keyword)
        return topic

    def update(self, topic_id: int, keyword) -> Topic:
        keyword = clean_keyword(keyword)
        topic = self.get(topic_id)

        others = self.db.execute(select(Topic).where(Topic.id != topic_id)).scalars().all()
        if self._is_taken(keyword, others):
            raise Duplicate("Topic already exists")

        topic.keyword = keyword
        topic.updated_at = utcnow()
        self._commit()
        self.db.refresh(topic)
        log.info("Updated topic %s (%r)", topic.id, topic.keyword)
        return topic

    def delete(self, topic_id: int) -> None:
        topic = self.get(topic_id)
        self.db.delete(topic)
        self._commit()
        log.info("Deleted topic %s", topic_id)

    @staticmethod
    def _is_taken(keyword: str, topics) -> bool:
        lowered = keyword.lower()
        return any(t.keyword.lower() == lowered for t in topics)

    def _commit(self) -> None:
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise Duplicate("Topic already exists") from exc
        except SQLAlchemyError:
            self.db.rollback()
            raise
