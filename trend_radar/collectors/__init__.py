"""
Source collectors.

Importing this package registers every built-in collector with the
PluginRegistry.
"""

from trend_radar.collectors.base import (
    CollectionError,
    CollectorPlugin,
    PluginRegistry,
    register_collector,
)
from trend_radar.collectors import fourchan, google_trends, reddit, tiktok, twitter  # noqa: F401

__all__ = [
    "CollectionError",
    "CollectorPlugin",
    "PluginRegistry",
    "register_collector",
]
