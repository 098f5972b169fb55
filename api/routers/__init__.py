"""
API routers for Trend Radar.
"""

__all__ = ["etf", "health", "metrics", "trends"]
