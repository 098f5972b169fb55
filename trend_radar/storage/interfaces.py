"""
Storage layer interface contracts.

The cache gateway depends on this Protocol rather than on a concrete
backend, so tests can substitute an in-memory repository.
"""

from typing import Any, Optional, Protocol


class CacheRepository(Protocol):
    """Interface for caching operations."""

    async def get(self, key: str) -> Optional[Any]:
        """
        Get a value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value if found, None otherwise
        """
        ...

    async def set(
        self,
        key: str,
        value: Any,
        ttl_seconds: Optional[int] = None,
    ) -> bool:
        """
        Set a value in cache.

        Args:
            key: Cache key
            value: JSON-serializable value to cache
            ttl_seconds: Time-to-live in seconds (None = default)

        Returns:
            True if successful
        """
        ...

    async def delete(self, key: str) -> bool:
        """Delete a key from cache."""
        ...


# ============================================================================
# Exceptions
# ============================================================================


class StorageError(Exception):
    """Base exception for storage operations."""

    pass


class ConnectionError(StorageError):
    """Exception for connection failures."""

    pass
