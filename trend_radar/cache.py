"""
Cache-aside gateway in front of an expensive computation.

The gateway reads a versioned key, serves the stored payload while it is
inside its TTL window, and otherwise recomputes it. Concurrent misses on
the same gateway share one computation, and a fresh payload whose write is
still in flight is served from memory until the write lands. Cache errors
never reach callers: a failed or timed-out read is a miss, a failed or
timed-out write is logged.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, Optional, Set, Tuple

from pydantic import ValidationError

from trend_radar.observability.metrics import record_cache_request
from trend_radar.storage.interfaces import CacheRepository
from trend_radar.types import CacheEntry

logger = logging.getLogger(__name__)

Payload = Dict[str, Any]


class CacheGateway:
    """
    Cache gateway for one versioned cache key.

    Example:
        gateway = CacheGateway(cache, "trend-radar:trends:v2", compute, ttl_seconds=300)
        payload, hit = await gateway.get()
    """

    def __init__(
        self,
        cache: Optional[CacheRepository],
        cache_key: str,
        compute: Callable[[], Awaitable[Payload]],
        ttl_seconds: int,
        clock: Optional[Callable[[], datetime]] = None,
        timeout_seconds: float = 2.0,
    ):
        """
        Initialize the gateway.

        Args:
            cache: Cache backend, or None to always recompute
            cache_key: Versioned key the payload is stored under
            compute: Coroutine function producing a fresh payload
            ttl_seconds: Freshness window
            clock: Returns the current UTC time (injectable for tests)
            timeout_seconds: Bound on each cache read and write
        """
        self.cache = cache
        self.cache_key = cache_key
        self.compute = compute
        self.ttl_seconds = ttl_seconds
        self.clock = clock or datetime.utcnow
        self.timeout_seconds = timeout_seconds
        self._inflight: Optional[asyncio.Task] = None
        self._pending: Set[asyncio.Task] = set()
        # Fresh entry whose cache write has not completed yet
        self._unwritten: Optional[CacheEntry] = None

    async def get(self, force_refresh: bool = False) -> Tuple[Payload, bool]:
        """
        Return the payload, from cache when fresh.

        Args:
            force_refresh: Skip the cache read and recompute

        Returns:
            (payload, hit) where hit is True if served from cache

        Raises:
            Exception: Whatever the computation raises
        """
        if force_refresh:
            record_cache_request(self.cache_key, "bypass")
        else:
            entry = await self._read()
            if entry is not None:
                return entry.payload, True

        payload = await self._refresh_once()
        return payload, False

    async def drain(self) -> None:
        """Wait for every pending cache write to finish."""
        if self._pending:
            logger.info(f"Draining {len(self._pending)} pending cache writes")
            await asyncio.gather(*self._pending, return_exceptions=True)

    async def _read(self) -> Optional[CacheEntry]:
        if self.cache is None:
            record_cache_request(self.cache_key, "miss")
            return None

        unwritten = self._unwritten
        if unwritten is not None and unwritten.is_fresh(self.clock()):
            logger.debug(f"Cache HIT (write pending): {self.cache_key}")
            record_cache_request(self.cache_key, "hit")
            return unwritten

        try:
            raw = await asyncio.wait_for(self.cache.get(self.cache_key), self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.warning(
                f"Cache read for '{self.cache_key}' timed out after {self.timeout_seconds}s"
            )
            record_cache_request(self.cache_key, "error")
            return None
        except Exception as e:
            logger.warning(f"Cache read error for '{self.cache_key}': {e}")
            record_cache_request(self.cache_key, "error")
            return None

        if raw is None:
            logger.debug(f"Cache MISS: {self.cache_key}")
            record_cache_request(self.cache_key, "miss")
            return None

        try:
            entry = CacheEntry.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Discarding malformed cache entry '{self.cache_key}': {e}")
            record_cache_request(self.cache_key, "error")
            return None

        if not entry.is_fresh(self.clock()):
            logger.debug(f"Cache STALE: {self.cache_key}")
            record_cache_request(self.cache_key, "stale")
            return None

        logger.debug(f"Cache HIT: {self.cache_key}")
        record_cache_request(self.cache_key, "hit")
        return entry

    async def _refresh_once(self) -> Payload:
        # One computation per key at a time; late arrivals await the same task
        if self._inflight is None:
            task = asyncio.create_task(self._refresh())
            self._inflight = task
            task.add_done_callback(self._clear_inflight)
        else:
            logger.debug(f"Joining in-flight refresh for '{self.cache_key}'")

        return await asyncio.shield(self._inflight)

    def _clear_inflight(self, task: asyncio.Task) -> None:
        if self._inflight is task:
            self._inflight = None

    async def _refresh(self) -> Payload:
        payload = await self.compute()

        if self.cache is not None:
            entry = CacheEntry(
                payload=payload, created_at=self.clock(), ttl_seconds=self.ttl_seconds
            )
            self._unwritten = entry
            store = asyncio.create_task(self._store(entry))
            self._pending.add(store)
            store.add_done_callback(self._pending.discard)

        return payload

    async def _store(self, entry: CacheEntry) -> None:
        try:
            await asyncio.wait_for(
                self.cache.set(
                    self.cache_key, entry.model_dump(mode="json"), ttl_seconds=self.ttl_seconds
                ),
                self.timeout_seconds,
            )
            logger.debug(f"Cached payload under '{self.cache_key}' (TTL={self.ttl_seconds}s)")
        except asyncio.TimeoutError:
            logger.warning(
                f"Cache write for '{self.cache_key}' timed out after {self.timeout_seconds}s"
            )
        except Exception as e:
            logger.warning(f"Cache write error for '{self.cache_key}': {e}")
        finally:
            if self._unwritten is entry:
                self._unwritten = None
