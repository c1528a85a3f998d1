"""Configuration management using pydantic-settings."""
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables (LEAGUE_*)."""

    # Backing document store
    database_url: str = "sqlite:///./league.db"
    database_echo: bool = False

    # Cache TTLs by category (seconds)
    ttl_tournaments: int = 300        # 5 minutes
    ttl_tournament_data: int = 180    # 3 minutes
    ttl_live_matches: int = 30        # 30 seconds
    ttl_news: int = 600               # 10 minutes
    ttl_videos: int = 900             # 15 minutes
    ttl_static_data: int = 1800       # 30 minutes (uncategorized)

    # Background sweep of expired entries
    cache_sweep_interval_seconds: float = 300.0
    cache_sweep_enabled: bool = True

    # Query limits
    bundle_live_limit: int = 10
    bundle_recent_limit: int = 15
    home_videos_limit: int = 3
    home_news_limit: int = 8
    matches_default_limit: int = 50

    # Concurrent store reads per logical query
    store_max_workers: int = 4

    log_level: str = "INFO"
    log_format: Optional[str] = None

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "LEAGUE_"


settings = Settings()
