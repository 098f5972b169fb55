"""
FastAPI dependency injection providers.

Resources live on the application state created by the lifespan in
api.main; tests replace these providers through `app.dependency_overrides`.
"""

from typing import Optional

from fastapi import HTTPException, status

from trend_radar.cache import CacheGateway
from trend_radar.config import Settings, get_settings
from trend_radar.storage.interfaces import CacheRepository


async def get_app_settings() -> Settings:
    return get_settings()


async def get_cache_repository() -> Optional[CacheRepository]:
    """
    Get Redis cache repository from application state.

    Returns:
        Redis cache repository or None if Redis is unavailable
    """
    from api.main import app_state

    return app_state.redis_cache


def _require(gateway: Optional[CacheGateway], name: str) -> CacheGateway:
    if gateway is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"{name} gateway not initialized",
        )
    return gateway


async def get_trends_gateway() -> CacheGateway:
    """
    Get the trend snapshot gateway from application state.

    Raises:
        HTTPException: 503 if the application has not finished starting
    """
    from api.main import app_state

    return _require(app_state.trends_gateway, "Trends")


async def get_etf_gateway() -> CacheGateway:
    from api.main import app_state

    return _require(app_state.etf_gateway, "ETF flows")
