"""
Prometheus metrics endpoint.
"""

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from trend_radar.observability.metrics import metrics_registry

router = APIRouter(
    prefix="/metrics",
    tags=["Monitoring"],
)


@router.get("", response_class=Response)
async def prometheus_metrics():
    """
    Expose Prometheus metrics.

    Example metrics exposed:
        - collector_runs_total{source="reddit",status="success"} 12
        - cache_requests_total{key="trend-radar:trends:v2",result="hit"} 40
        - pipeline_duration_seconds_bucket{le="10.0"} 11
    """
    return Response(
        content=generate_latest(metrics_registry),
        media_type=CONTENT_TYPE_LATEST,
    )
