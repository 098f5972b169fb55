"""
Environment-driven configuration for Trend Radar.

Values are read from the process environment (optionally seeded from a
.env file) into a frozen Settings model. Nothing in the pipeline hardcodes
credentials, identifiers or the cache TTL.
"""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

# Load environment variables from .env file
load_dotenv()


class Settings(BaseModel):
    """Runtime settings."""

    # Short-video scraper (Apify)
    apify_token: str = ""
    apify_actor_id: str = "clockworks~tiktok-trends-scraper"

    # Cache
    cache_ttl_seconds: int = 300
    cache_key_version: str = "v2"
    etf_cache_ttl_seconds: int = 3600
    cache_timeout_seconds: float = 2.0
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: Optional[str] = None

    # Timeouts
    adapter_timeout_seconds: float = 20.0
    pipeline_timeout_seconds: float = 45.0

    # Enrichment
    enrichment_enabled: bool = True
    enrichment_top_n: int = 10
    enrichment_timeout_seconds: float = 8.0

    # Source tuning
    rank_growth_scale: float = 10.0
    max_items_per_source: int = 30
    reddit_subreddits: str = "memes+dankmemes+me_irl+MemeEconomy+okbuddyretard"
    fourchan_board: str = "b"
    twitter_trends_url: str = "https://trends24.in/united-states/"
    google_trends_geo: str = "US"

    # Service
    log_level: str = "INFO"
    log_json: bool = False
    cors_origins: str = "*"

    class Config:
        frozen = True


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_settings_from_env() -> Settings:
    """
    Build Settings from environment variables.

    Returns:
        Settings populated from the environment, defaults for anything unset
    """
    defaults = Settings()
    return Settings(
        apify_token=os.getenv("APIFY_TOKEN", defaults.apify_token),
        apify_actor_id=os.getenv("APIFY_ACTOR_ID", defaults.apify_actor_id),
        cache_ttl_seconds=int(os.getenv("CACHE_TTL_SECONDS", defaults.cache_ttl_seconds)),
        cache_key_version=os.getenv("CACHE_KEY_VERSION", defaults.cache_key_version),
        etf_cache_ttl_seconds=int(
            os.getenv("ETF_CACHE_TTL_SECONDS", defaults.etf_cache_ttl_seconds)
        ),
        cache_timeout_seconds=float(
            os.getenv("CACHE_TIMEOUT_SECONDS", defaults.cache_timeout_seconds)
        ),
        redis_host=os.getenv("REDIS_HOST", defaults.redis_host),
        redis_port=int(os.getenv("REDIS_PORT", defaults.redis_port)),
        redis_db=int(os.getenv("REDIS_DB", defaults.redis_db)),
        redis_password=os.getenv("REDIS_PASSWORD") or None,
        adapter_timeout_seconds=float(
            os.getenv("ADAPTER_TIMEOUT_SECONDS", defaults.adapter_timeout_seconds)
        ),
        pipeline_timeout_seconds=float(
            os.getenv("PIPELINE_TIMEOUT_SECONDS", defaults.pipeline_timeout_seconds)
        ),
        enrichment_enabled=_env_bool("ENRICHMENT_ENABLED", defaults.enrichment_enabled),
        enrichment_top_n=int(os.getenv("ENRICHMENT_TOP_N", defaults.enrichment_top_n)),
        enrichment_timeout_seconds=float(
            os.getenv("ENRICHMENT_TIMEOUT_SECONDS", defaults.enrichment_timeout_seconds)
        ),
        rank_growth_scale=float(os.getenv("RANK_GROWTH_SCALE", defaults.rank_growth_scale)),
        max_items_per_source=int(
            os.getenv("MAX_ITEMS_PER_SOURCE", defaults.max_items_per_source)
        ),
        reddit_subreddits=os.getenv("REDDIT_SUBREDDITS", defaults.reddit_subreddits),
        fourchan_board=os.getenv("FOURCHAN_BOARD", defaults.fourchan_board),
        twitter_trends_url=os.getenv("TWITTER_TRENDS_URL", defaults.twitter_trends_url),
        google_trends_geo=os.getenv("GOOGLE_TRENDS_GEO", defaults.google_trends_geo),
        log_level=os.getenv("LOG_LEVEL", defaults.log_level),
        log_json=_env_bool("LOG_JSON", defaults.log_json),
        cors_origins=os.getenv("CORS_ORIGINS", defaults.cors_origins),
    )


# Cache for loaded settings
_settings_cache: Optional[Settings] = None


def get_settings(force_reload: bool = False) -> Settings:
    """
    Get the process-wide settings.

    Args:
        force_reload: If True, re-read the environment even if cached

    Returns:
        Settings instance
    """
    global _settings_cache

    if _settings_cache is None or force_reload:
        _settings_cache = load_settings_from_env()

    return _settings_cache
