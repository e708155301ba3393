# feedboard/core/config.py
from __future__ import annotations

from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict


BACKEND_ROOT = Path(__file__).resolve().parents[2]
ENV_PATH = BACKEND_ROOT / ".env"


class Settings(BaseSettings):
    env: str = "dev"
    database_url: str = "sqlite:///./feedboard.db"
    log_level: str = "INFO"

    # Upstream feeds
    news_rss_url: str = "https://news.google.com/rss/search"
    reddit_rss_url: str = "https://www.reddit.com/search.rss"
    # Reddit rejects generic clients from cloud hosts
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )
    fetch_timeout_seconds: float = 10.0
    max_items: int = 25
    default_window_hours: int = 24

    # Topics
    topic_limit: int = 20

    cors_origins: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH) if ENV_PATH.exists() else None,
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
