import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from pydantic import BaseModel
from feedboard.db.session import get_db
from feedboard.core.errors import TopicError
from feedboard.services.topics.registry import TopicRegistry

router = APIRouter()
log = logging.getLogger(__name__)


class TopicPayload(BaseModel):
    keyword: str | None = None


def _error(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


@router.get("")
def list_topics(db: Session = Depends(get_db)):
    try:
        topics = TopicRegistry(db).list()
    except SQLAlchemyError:
        log.exception("Error fetching topics")
        return _error(500, "Failed to fetch topics", topics=[])

    return {"topics": [t.to_dict() for t in topics]}


@router.post("", status_code=201)
def create_topic(data: TopicPayload, db: Session = Depends(get_db)):
    try:
        topic = TopicRegistry(db).create(data.keyword)
    except TopicError as e:
        return _error(e.status_code, str(e))
    except SQLAlchemyError:
        log.exception("Error creating topic")
        return _error(500, "Failed to create topic")

    return {"topic": topic.to_dict()}


@router.put("/{topic_id}")
def update_topic(topic_id: int, data: TopicPayload, db: Session = Depends(get_db)):
    try:
        topic = TopicRegistry(db).update(topic_id, data.keyword)
    except TopicError as e:
        return _error(e.status_code, str(e))
    except SQLAlchemyError:
        log.exception("Error updating topic %s", topic_id)
        return _error(500, "Failed to update topic")

    return {"topic": topic.to_dict()}


@router.delete("/{topic_id}")
def delete_topic(topic_id: int, db: Session = Depends(get_db)):
    try:
        TopicRegistry(db).delete(topic_id)
    except TopicError as e:
        return _error(e.status_code, str(e))
    except SQLAlchemyError:
        log.exception("Error deleting topic %s", topic_id)
        return _error(500, "Failed to delete topic")

    return {"success": True}
