"""
Redis cache repository implementation.

Stores JSON documents under string keys with a Redis-side expiry. Freshness
of cached trend snapshots is decided by the cache gateway; the Redis TTL
only garbage-collects entries nobody reads anymore.
"""

import json
import logging
from typing import Any, Optional

import redis.asyncio as aioredis
from redis.asyncio import Redis
from redis.exceptions import RedisError

from trend_radar.storage.interfaces import ConnectionError, StorageError

logger = logging.getLogger(__name__)


class RedisCacheRepository:
    """Redis implementation of CacheRepository."""

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        db: int = 0,
        password: Optional[str] = None,
        default_ttl: int = 300,
        encoding: str = "utf-8",
        max_connections: int = 20,
        socket_timeout: Optional[float] = 2.0,
    ):
        """
        Initialize Redis cache repository.

        Args:
            host: Redis server host
            port: Redis server port
            db: Redis database number (0-15)
            password: Optional authentication password
            default_ttl: Default time-to-live in seconds
            encoding: Character encoding for stored documents
            max_connections: Maximum number of connections in the pool
            socket_timeout: Seconds before a connect, read or write gives up
        """
        self.host = host
        self.port = port
        self.db = db
        self.password = password
        self.default_ttl = default_ttl
        self.encoding = encoding
        self.max_connections = max_connections
        self.socket_timeout = socket_timeout
        self._client: Optional[Redis] = None

    async def connect(self) -> Redis:
        """
        Establish connection to Redis.

        Returns:
            Redis client instance

        Raises:
            ConnectionError: If connection fails
        """
        if self._client is not None:
            return self._client

        client = aioredis.from_url(
            f"redis://{self.host}:{self.port}/{self.db}",
            password=self.password,
            encoding=self.encoding,
            max_connections=self.max_connections,
            socket_timeout=self.socket_timeout,
            socket_connect_timeout=self.socket_timeout,
        )

        try:
            await client.ping()
        except (RedisError, OSError) as e:
            await client.close()
            logger.error(f"Failed to connect to Redis: {e}")
            raise ConnectionError(f"Redis connection failed: {e}") from e

        self._client = client
        logger.info(f"Connected to Redis at {self.host}:{self.port}/{self.db}")
        return self._client

    async def close(self):
        """Close the Redis connection."""
        if self._client is not None:
            await self._client.close()
            self._client = None
            logger.info("Redis connection closed")

    @property
    def client(self) -> Redis:
        """Get the Redis client instance."""
        if self._client is None:
            raise StorageError("Redis client not connected. Call connect() first.")
        return self._client

    async def get(self, key: str) -> Optional[Any]:
        """
        Get a value from cache.

        Args:
            key: Cache key

        Returns:
            Decoded JSON document if found, None otherwise

        Raises:
            StorageError: If retrieval or decoding fails
        """
        try:
            data = await self.client.get(key)
        except RedisError as e:
            logger.error(f"Failed to get cache key '{key}': {e}")
            raise StorageError(f"Cache retrieval failed: {e}") from e

        if data is None:
            logger.debug(f"Cache miss: {key}")
            return None

        try:
            value = json.loads(data.decode(self.encoding))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise StorageError(f"Cached value under '{key}' is not valid JSON: {e}") from e

        logger.debug(f"Cache hit: {key}")
        return value

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
            value: JSON-serializable value
            ttl_seconds: Time-to-live in seconds (None = use default)

        Returns:
            True if successful

        Raises:
            StorageError: If set operation fails
        """
        try:
            data = json.dumps(value, default=str).encode(self.encoding)
            ttl = ttl_seconds if ttl_seconds is not None else self.default_ttl

            if ttl > 0:
                await self.client.setex(key, ttl, data)
            else:
                # No expiration
                await self.client.set(key, data)

            logger.debug(f"Cached key '{key}' with TTL={ttl}s")
            return True

        except (RedisError, TypeError, ValueError) as e:
            logger.error(f"Failed to set cache key '{key}': {e}")
            raise StorageError(f"Cache set failed: {e}") from e

    async def delete(self, key: str) -> bool:
        """
        Delete a key from cache.

        Returns:
            True if deleted, False if key didn't exist

        Raises:
            StorageError: If deletion fails
        """
        try:
            result = await self.client.delete(key)
        except RedisError as e:
            logger.error(f"Failed to delete cache key '{key}': {e}")
            raise StorageError(f"Cache deletion failed: {e}") from e

        deleted = result > 0
        if deleted:
            logger.debug(f"Deleted cache key: {key}")
        return deleted
