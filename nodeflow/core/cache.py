"""Cache service with Redis (production) or in-memory (single process) backend.

The node catalog only depends on the ``CachePort`` protocol below, so any
object offering ``remember``/``delete`` can stand in for ``CacheService``.
"""

import asyncio
import inspect
import json
import time
from typing import Any, Awaitable, Callable, Dict, Optional, Protocol, Tuple, Union

import redis.asyncio as redis

from nodeflow.core.config import Settings
from nodeflow.core.logging import get_logger, log_cache_operation

logger = get_logger(__name__)

Factory = Callable[[], Union[Any, Awaitable[Any]]]


def _snapshot(value: Any) -> Any:
    """Detached copy with the same shape a Redis round-trip would give."""
    return json.loads(json.dumps(value, default=str))


class CachePort(Protocol):
    """Protocol for get-or-compute caches (enables duck typing)."""

    async def remember(self, key: str, ttl: int, factory: Factory) -> Any:
        """Return the cached value for key, computing and storing it on a miss."""
        ...

    async def delete(self, key: str) -> bool:
        """Invalidate key."""
        ...


class CacheService:
    """Async cache service with Redis or in-memory backend.

    Backend selection:
    - Redis: When NODEFLOW_REDIS_ENABLED=true and a Redis URL is configured
    - Memory: Otherwise, or when the Redis connection fails at startup

    Values stored in Redis must be JSON-serializable.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        self.redis: Optional[redis.Redis] = None
        self.memory_cache: Dict[str, Tuple[Any, Optional[float]]] = {}
        self.use_redis = self.settings.use_redis
        self._key_locks: Dict[str, asyncio.Lock] = {}

    async def startup(self):
        """Initialize cache connection."""
        if not self.use_redis:
            logger.info("Using in-memory cache", redis_enabled=self.settings.redis_enabled)
            return

        try:
            self.redis = redis.from_url(
                self.settings.redis_url,
                encoding="utf-8",
                decode_responses=True,
                socket_timeout=5,
                socket_connect_timeout=5,
                retry_on_timeout=True
            )
            await self.redis.ping()
            logger.info("Redis cache initialized", url=self.settings.redis_url)
        except Exception as e:
            logger.warning("Redis connection failed, falling back to memory", error=str(e))
            self.use_redis = False
            self.redis = None

    async def shutdown(self):
        """Close cache connections."""
        if self.redis:
            await self.redis.close()
            logger.info("Redis cache connections closed")

        self.memory_cache.clear()

    def _redis_ready(self) -> bool:
        return self.use_redis and self.redis is not None

    async def get(self, key: str) -> Optional[Any]:
        """Get value from cache."""
        try:
            if self._redis_ready():
                value = await self.redis.get(key)
                log_cache_operation(logger, "get", key, hit=value is not None)
                return json.loads(value) if value is not None else None

            entry = self.memory_cache.get(key)
            if entry is not None:
                value, expires_at = entry
                if expires_at is None or expires_at > time.monotonic():
                    log_cache_operation(logger, "get", key, hit=True)
                    return _snapshot(value)
                del self.memory_cache[key]
            log_cache_operation(logger, "get", key, hit=False)
            return None

        except Exception as e:
            logger.error("Cache get failed", key=key, error=str(e))
            return None

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """Set value in cache with optional TTL."""
        try:
            ttl = ttl or self.settings.cache_ttl

            if self._redis_ready():
                serialized = json.dumps(value, default=str)
                await self.redis.setex(key, ttl, serialized)
            else:
                self.memory_cache[key] = (_snapshot(value), time.monotonic() + ttl)
            log_cache_operation(logger, "set", key, ttl=ttl)
            return True

        except Exception as e:
            logger.error("Cache set failed", key=key, error=str(e))
            return False

    async def delete(self, key: str) -> bool:
        """Delete value from cache."""
        try:
            if self._redis_ready():
                deleted = bool(await self.redis.delete(key))
            else:
                deleted = self.memory_cache.pop(key, None) is not None
            log_cache_operation(logger, "delete", key, deleted=deleted)
            return deleted

        except Exception as e:
            logger.error("Cache delete failed", key=key, error=str(e))
            return False

    async def exists(self, key: str) -> bool:
        """Check if key exists in cache."""
        return await self.get(key) is not None

    async def remember(self, key: str, ttl: int, factory: Factory) -> Any:
        """Get-or-compute with TTL.

        Concurrent callers missing on the same key wait on a per-key lock, so
        the factory runs at most once per miss in this process and later
        callers read the freshly stored value.
        """
        value = await self.get(key)
        if value is not None:
            return value

        lock = self._key_locks.setdefault(key, asyncio.Lock())
        async with lock:
            value = await self.get(key)
            if value is not None:
                return value

            value = factory()
            if inspect.isawaitable(value):
                value = await value
            await self.set(key, value, ttl)
            log_cache_operation(logger, "remember", key, hit=False, ttl=ttl)
            return value

    def is_redis_available(self) -> bool:
        """Check if Redis is available and connected."""
        return self._redis_ready()
