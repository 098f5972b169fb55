"""
Trend snapshot endpoint.

Serves the ranked, cross-source trend list through the cache gateway.
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import JSONResponse

from api.dependencies import get_app_settings, get_trends_gateway
from api.schemas.trends import TrendsResponse
from trend_radar.cache import CacheGateway
from trend_radar.config import Settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/trends", tags=["Trends"])


@router.get(
    "",
    response_model=TrendsResponse,
    response_model_exclude_none=True,
    summary="Get trending memes",
    description="Ranked trends aggregated across all sources, cached for the configured TTL.",
)
async def get_trends(
    response: Response,
    refresh: bool = Query(False, description="Bypass the cache and recompute"),
    force: bool = Query(False, description="Alias of refresh"),
    gateway: CacheGateway = Depends(get_trends_gateway),
    settings: Settings = Depends(get_app_settings),
):
    """
    Get the current trend snapshot.

    Returns:
        TrendsResponse; `cached` tells whether it came from the cache. On
        failure the status is 500 with an empty trend list.
    """
    try:
        payload, hit = await gateway.get(force_refresh=refresh or force)
    except Exception as e:
        logger.error(f"Failed to build trend snapshot: {e}", exc_info=True)
        body = TrendsResponse(
            success=False,
            trends=[],
            count=0,
            sources={},
            timestamp=datetime.utcnow().isoformat() + "Z",
            cached=False,
            error=str(e) or e.__class__.__name__,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=body.model_dump(),
            headers={"X-Cache": "MISS", "Cache-Control": "no-store"},
        )

    response.headers["X-Cache"] = "HIT" if hit else "MISS"
    response.headers["Cache-Control"] = f"public, max-age={settings.cache_ttl_seconds}"

    return TrendsResponse(
        success=True,
        trends=payload.get("trends", []),
        count=payload.get("count", 0),
        sources=payload.get("sources", {}),
        timestamp=payload.get("timestamp") or datetime.utcnow().isoformat() + "Z",
        cached=hit,
    )
