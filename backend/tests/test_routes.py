import pytest
from sqlalchemy.exc import OperationalError

from feedboard.core.errors import FetchFailed
from feedboard.services.ingest import news, reddit
from feedboard.services.ingest.items import NewsItem, RedditItem
from feedboard.services.topics.registry import TopicRegistry


NEWS_ITEM = NewsItem(
    id="news-abc", title="Apple beats estimates", source_label="Reuters",
    url="https://www.reuters.com/x", published_at="2026-10-19T10:00:00+00:00",
    thumbnail="https://img.example.com/a.jpg",
)
REDDIT_ITEM = RedditItem(
    id="t3_abc", title="AAPL earnings thread", subreddit="r/stocks",
    url="https://www.reddit.com/r/stocks/comments/abc/", published_at="2026-10-19T11:00:00+00:00",
)


def fake_fetch(items, calls=None):
    async def fetch(keyword, hours):
        if calls is not None:
            calls.append((keyword, hours))
        return items
    return fetch


def failing_fetch(source):
    async def fetch(keyword, hours):
        raise FetchFailed(source, "upstream returned 502", status_code=502)
    return fetch


def test_health(client):
    """Test the health check"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_topic_lifecycle(client):
    """Test create, list, update and delete over HTTP"""
    response = client.post("/topics", json={"keyword": " AAPL "})
    assert response.status_code == 201
    topic = response.json()["topic"]
    assert topic["keyword"] == "AAPL"
    assert set(topic) == {"id", "keyword", "createdAt", "updatedAt"}

    response = client.get("/topics")
    assert response.status_code == 200
    assert [t["keyword"] for t in response.json()["topics"]] == ["AAPL"]

    response = client.put(f"/topics/{topic['id']}", json={"keyword": "Apple"})
    assert response.status_code == 200
    assert response.json()["topic"]["keyword"] == "Apple"

    response = client.delete(f"/topics/{topic['id']}")
    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert client.get("/topics").json() == {"topics": []}


def test_create_topic_errors(client):
    """Test duplicate, missing, oversized and non-string keywords"""
    assert client.post("/topics", json={"keyword": "AAPL"}).status_code == 201

    response = client.post("/topics", json={"keyword": "aapl"})
    assert response.status_code == 400
    assert response.json() == {"error": "Topic already exists"}

    response = client.post("/topics", json={})
    assert response.status_code == 400
    assert response.json() == {"error": "Keyword is required"}

    response = client.post("/topics", json={"keyword": "x" * 256})
    assert response.status_code == 400
    assert response.json() == {"error": "Keyword must be 1-255 characters"}

    response = client.post("/topics", json={"keyword": 123})
    assert response.status_code == 400
    assert "error" in response.json()


def test_create_topic_limit(client):
    """Test the 21st topic is rejected over HTTP"""
    for n in range(20):
        assert client.post("/topics", json={"keyword": f"topic {n}"}).status_code == 201

    response = client.post("/topics", json={"keyword": "topic 20"})
    assert response.status_code == 400
    assert response.json() == {"error": "Maximum 20 topics allowed"}


def test_update_and_delete_errors(client):
    """Test update and delete error statuses"""
    first = client.post("/topics", json={"keyword": "AAPL"}).json()["topic"]
    client.post("/topics", json={"keyword": "MSFT"})

    response = client.put(f"/topics/{first['id']}", json={"keyword": "msft"})
    assert response.status_code == 400

    response = client.put("/topics/999", json={"keyword": "GOOG"})
    assert response.status_code == 404
    assert response.json() == {"error": "Topic not found"}

    assert client.delete("/topics/999").status_code == 404
    assert client.delete("/topics/abc").status_code == 400
    assert client.put("/topics/abc", json={"keyword": "GOOG"}).status_code == 400


def test_database_errors_are_generic(client, monkeypatch):
    """Test storage failures surface as a short 500"""
    def broken(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    monkeypatch.setattr(TopicRegistry, "list", broken)
    monkeypatch.setattr(TopicRegistry, "create", broken)

    response = client.get("/topics")
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch topics", "topics": []}

    response = client.post("/topics", json={"keyword": "AAPL"})
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to create topic"}


def test_news_endpoint(client, monkeypatch):
    """Test news items and the default window"""
    calls = []
    monkeypatch.setattr(news, "fetch_news", fake_fetch([NEWS_ITEM], calls))

    response = client.get("/news", params={"topic": "AAPL"})
    assert response.status_code == 200
    assert response.json() == {"items": [NEWS_ITEM.to_dict()]}
    assert response.json()["items"][0]["thumbnail"] == "https://img.example.com/a.jpg"

    client.get("/news", params={"topic": "AAPL", "hours": 6})
    assert calls == [("AAPL", 24), ("AAPL", 6)]


def test_news_endpoint_errors(client, monkeypatch):
    """Test missing topic, bad hours and upstream failure"""
    response = client.get("/news")
    assert response.status_code == 400
    assert response.json() == {"error": "Topic parameter is required", "items": []}

    response = client.get("/news", params={"topic": "AAPL", "hours": 0})
    assert response.status_code == 400
    assert response.json()["items"] == []

    assert client.get("/news", params={"topic": "AAPL", "hours": "soon"}).status_code == 400

    monkeypatch.setattr(news, "fetch_news", failing_fetch("news"))
    response = client.get("/news", params={"topic": "AAPL"})
    assert response.status_code == 500
    assert response.json() == {"error": "news: upstream returned 502", "items": []}


def test_reddit_endpoint(client, monkeypatch):
    """Test reddit items, fixed counters and failures"""
    monkeypatch.setattr(reddit, "fetch_reddit", fake_fetch([REDDIT_ITEM]))

    response = client.get("/reddit", params={"topic": "AAPL", "hours": 48})
    assert response.status_code == 200
    item = response.json()["items"][0]
    assert item["subreddit"] == "r/stocks"
    assert item["score"] == 0
    assert item["commentsCount"] == 0

    assert client.get("/reddit", params={"topic": "  "}).status_code == 400

    monkeypatch.setattr(reddit, "fetch_reddit", failing_fetch("reddit"))
    response = client.get("/reddit", params={"topic": "AAPL"})
    assert response.status_code == 500
    assert response.json()["items"] == []


def test_feed_endpoint(client, monkeypatch):
    """Test the combined feed, including a partial failure"""
    monkeypatch.setattr(news, "fetch_news", fake_fetch([NEWS_ITEM]))
    monkeypatch.setattr(reddit, "fetch_reddit", fake_fetch([REDDIT_ITEM]))

    body = client.get("/feed", params={"topic": "AAPL"}).json()
    assert body == {"newsItems": [NEWS_ITEM.to_dict()], "redditItems": [REDDIT_ITEM.to_dict()]}

    monkeypatch.setattr(news, "fetch_news", failing_fetch("news"))
    response = client.get("/feed", params={"topic": "AAPL"})
    assert response.status_code == 200
    body = response.json()
    assert body["newsItems"] == []
    assert body["redditItems"] == [REDDIT_ITEM.to_dict()]
    assert "news" in body["partialError"]

    monkeypatch.setattr(reddit, "fetch_reddit", failing_fetch("reddit"))
    response = client.get("/feed", params={"topic": "AAPL"})
    assert response.status_code == 500
    assert response.json()["newsItems"] == []
    assert response.json()["redditItems"] == []


def test_topic_timestamps_are_utc(client):
    """Test createdAt and updatedAt carry a UTC offset"""
    topic = client.post("/topics", json={"keyword": "AAPL"}).json()["topic"]
    assert topic["createdAt"].endswith("+00:00")
    assert topic["updatedAt"].endswith("+00:00")
