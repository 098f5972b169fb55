"""Cache storage backends."""

from trend_radar.storage.interfaces import CacheRepository, ConnectionError, StorageError

__all__ = ["CacheRepository", "ConnectionError", "StorageError"]
