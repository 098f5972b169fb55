"""
Wiring between the pipeline, the ETF scraper and their cache gateways.
"""

import logging
from typing import Any, Dict, Optional

from trend_radar.cache import CacheGateway
from trend_radar.config import Settings, get_settings
from trend_radar.etf import fetch_etf_flows
from trend_radar.processing.pipeline import TrendPipeline
from trend_radar.storage.interfaces import CacheRepository
from trend_radar.types import PipelineResult

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "trend-radar"


def trends_cache_key(version: str) -> str:
    """Cache key for the trend snapshot; bump the version on schema changes."""
    return f"{CACHE_KEY_PREFIX}:trends:{version}"


def etf_cache_key(version: str) -> str:
    return f"{CACHE_KEY_PREFIX}:etf-flows:{version}"


def build_trends_payload(result: PipelineResult) -> Dict[str, Any]:
    """
    Serialize a pipeline result into the cached payload.

    Args:
        result: Finished pipeline run

    Returns:
        JSON-ready dict with trends, count, per-source observation counts
        and the snapshot timestamp
    """
    timestamp = result.completed_at or result.started_at
    return {
        "trends": [t.model_dump(mode="json", exclude_none=True) for t in result.trends],
        "count": len(result.trends),
        "sources": dict(result.source_counts),
        "timed_out_sources": list(result.timed_out_sources),
        "timestamp": timestamp.isoformat() + "Z",
    }


def make_trends_gateway(
    cache: Optional[CacheRepository],
    settings: Optional[Settings] = None,
    pipeline: Optional[TrendPipeline] = None,
) -> CacheGateway:
    """
    Build the cache gateway serving the trend snapshot.

    Args:
        cache: Cache backend (None disables caching)
        settings: Runtime settings
        pipeline: Pipeline to run on a miss

    Returns:
        Configured CacheGateway
    """
    settings = settings or get_settings()
    pipeline = pipeline or TrendPipeline(settings=settings)

    async def compute() -> Dict[str, Any]:
        return build_trends_payload(await pipeline.run())

    return CacheGateway(
        cache,
        trends_cache_key(settings.cache_key_version),
        compute,
        ttl_seconds=settings.cache_ttl_seconds,
        timeout_seconds=settings.cache_timeout_seconds,
    )


def make_etf_gateway(
    cache: Optional[CacheRepository], settings: Optional[Settings] = None
) -> CacheGateway:
    settings = settings or get_settings()
    return CacheGateway(
        cache,
        etf_cache_key(settings.cache_key_version),
        fetch_etf_flows,
        ttl_seconds=settings.etf_cache_ttl_seconds,
        timeout_seconds=settings.cache_timeout_seconds,
    )
