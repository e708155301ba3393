import logging

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from feedboard.core.config import settings
from feedboard.core.errors import AggregationFailed, FetchFailed
from feedboard.services.ingest import news, reddit
from feedboard.services.ingest.pipeline import aggregate

router = APIRouter()
log = logging.getLogger(__name__)


def check_query(topic: str | None, hours: int, **empty) -> JSONResponse | None:
    if not topic or not topic.strip():
        return JSONResponse(status_code=400, content={"error": "Topic parameter is required", **empty})
    if hours <= 0:
        return JSONResponse(status_code=400, content={"error": "hours must be a positive integer", **empty})
    return None


@router.get("/news")
async def get_news(topic: str | None = Query(None), hours: int = Query(settings.default_window_hours)):
    """
    Google News items for a topic published in the last ``hours``.
    """
    invalid = check_query(topic, hours, items=[])
    if invalid:
        return invalid

    try:
        items = await news.fetch_news(topic.strip(), hours)
    except FetchFailed as e:
        return JSONResponse(status_code=500, content={"error": str(e), "items": []})
    except Exception:
        log.exception("Error fetching news RSS")
        return JSONResponse(status_code=500, content={"error": "Failed to fetch news", "items": []})

    return {"items": [i.to_dict() for i in items]}


@router.get("/reddit")
async def get_reddit(topic: str | None = Query(None), hours: int = Query(settings.default_window_hours)):
    invalid = check_query(topic, hours, items=[])
    if invalid:
        return invalid

    try:
        items = await reddit.fetch_reddit(topic.strip(), hours)
    except FetchFailed as e:
        return JSONResponse(status_code=500, content={"error": str(e), "items": []})
    except Exception:
        log.exception("Error fetching Reddit posts")
        return JSONResponse(status_code=500, content={"error": "Failed to fetch Reddit posts", "items": []})

    return {"items": [i.to_dict() for i in items]}


@router.get("/feed")
async def get_feed(topic: str | None = Query(None), hours: int = Query(settings.default_window_hours)):
    """
    Both sources at once. One failing source still returns 200 with
    ``partialError`` set; both failing is a 500.
    """
    empty = {"newsItems": [], "redditItems": []}
    invalid = check_query(topic, hours, **empty)
    if invalid:
        return invalid

    try:
        result = await aggregate(topic.strip(), hours)
    except AggregationFailed as e:
        return JSONResponse(status_code=500, content={"error": str(e), **empty})

    return result.to_dict()
