"""Typed settings configuration - single source of truth."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Storage tiers, selected once at process start
    cache_backend: Literal["memory", "redis"] = "memory"
    remote_backend: Literal["memory", "sql"] = "memory"

    # Database (remote document store)
    database_url: str | None = None

    # Cache (local tier)
    redis_url: str | None = None

    # Listing caps
    draft_list_limit: int = 20
    validation_history_limit: int = 10

    # Notification endpoint
    notification_endpoint_url: str = "http://localhost:5001/notifications/send"
    notification_timeout_seconds: float = 4.0

    # Caller ids allowed to record review decisions (JSON list in REVIEWER_IDS)
    reviewer_ids: list[str] = []

    # Simulated catalog lookup latency (milliseconds)
    catalog_latency_ms: int = 0


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
