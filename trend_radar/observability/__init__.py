"""
Observability for Trend Radar: structured logging and Prometheus metrics.
"""

from trend_radar.observability.logging import log_context, setup_logging

__all__ = ["log_context", "setup_logging"]
