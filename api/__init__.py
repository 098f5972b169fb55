"""
HTTP API for Trend Radar.
"""

__version__ = "1.0.0"
