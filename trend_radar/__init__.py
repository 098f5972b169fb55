"""
Trend Radar: cross-source trending meme aggregation.
"""

__version__ = "1.0.0"
