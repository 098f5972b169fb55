"""
Prometheus metrics for Trend Radar.

This module defines the counters and histograms recorded by the
collectors, the pipeline, the enrichment stage and the cache gateway.
"""

from prometheus_client import CollectorRegistry, Counter, Histogram

# Dedicated registry for this application
metrics_registry = CollectorRegistry()


# ============================================================================
# Collector Metrics
# ============================================================================

collector_runs_counter = Counter(
    "collector_runs_total",
    "Collector runs by outcome",
    ["source", "status"],  # status: success, empty, failure, timeout
    registry=metrics_registry,
)

collector_items_counter = Counter(
    "collector_items_total",
    "Observations produced by collectors",
    ["source"],
    registry=metrics_registry,
)

# ============================================================================
# Pipeline Metrics
# ============================================================================

pipeline_duration = Histogram(
    "pipeline_duration_seconds",
    "Duration of a full pipeline run",
    buckets=[0.5, 1, 2.5, 5, 10, 20, 30, 45, 60],
    registry=metrics_registry,
)

pipeline_runs_counter = Counter(
    "pipeline_runs_total",
    "Pipeline runs by outcome",
    ["status"],  # status: success, failure
    registry=metrics_registry,
)

enrichment_lookups_counter = Counter(
    "enrichment_lookups_total",
    "Meme knowledge lookups by outcome",
    ["status"],  # status: found, not_found, failure
    registry=metrics_registry,
)

# ============================================================================
# Cache Metrics
# ============================================================================

cache_requests_counter = Counter(
    "cache_requests_total",
    "Cache gateway requests by result",
    ["key", "result"],  # result: hit, miss, stale, bypass, error
    registry=metrics_registry,
)


def record_collector_run(source: str, status: str, items: int = 0) -> None:
    """
    Record the outcome of one collector run.

    Args:
        source: Collector name
        status: Outcome label
        items: Number of observations produced
    """
    collector_runs_counter.labels(source=source, status=status).inc()
    if items:
        collector_items_counter.labels(source=source).inc(items)


def record_cache_request(key: str, result: str) -> None:
    cache_requests_counter.labels(key=key, result=result).inc()
