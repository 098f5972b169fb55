"""
Spot-ETF flow snapshot endpoint.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from api.dependencies import get_app_settings, get_etf_gateway
from api.schemas.trends import ETFFlowsResponse
from trend_radar.cache import CacheGateway
from trend_radar.config import Settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/etf-flows", tags=["ETF Flows"])


@router.get(
    "",
    response_model=ETFFlowsResponse,
    summary="Get spot-ETF flows",
    description="Daily net flows and weekly totals for bitcoin, ethereum and solana spot ETFs.",
)
async def get_etf_flows(
    response: Response,
    refresh: bool = Query(False, description="Bypass the cache and re-scrape"),
    gateway: CacheGateway = Depends(get_etf_gateway),
    settings: Settings = Depends(get_app_settings),
) -> ETFFlowsResponse:
    try:
        payload, hit = await gateway.get(force_refresh=refresh)
    except Exception as e:
        logger.error(f"Failed to fetch ETF flows: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch ETF flows",
        )

    response.headers["X-Cache"] = "HIT" if hit else "MISS"
    response.headers["Cache-Control"] = f"public, max-age={settings.etf_cache_ttl_seconds}"
    return ETFFlowsResponse(success=True, cached=hit, data=payload)
