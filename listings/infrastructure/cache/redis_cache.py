"""Redis-based caching for principal lookups"""
from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import redis.asyncio as redis

from listings.domain.entities.principal import Principal
from listings.infrastructure.config.settings import get_settings

logger = logging.getLogger(__name__)


class CacheService:
    """
    Async Redis cache service with TTL support.

    Every operation degrades to a miss/no-op when Redis is unreachable, so
    callers always fall back to the database.
    """

    def __init__(self, redis_client: redis.Redis | None = None):
        """
        Initialize cache service

        Args:
            redis_client: Optional Redis client (for testing/DI)
        """
        self.redis = redis_client
        self.settings = get_settings()
        self._connected = redis_client is not None

    async def connect(self):
        """Establish Redis connection (call on app startup)"""
        if self.redis is None:
            try:
                self.redis = redis.Redis(
                    host=self.settings.redis_host,
                    port=self.settings.redis_port,
                    db=self.settings.redis_db,
                    password=self.settings.redis_password or None,
                    decode_responses=True,
                    socket_connect_timeout=5,
                    socket_timeout=2,
                )
                await self.redis.ping()
                self._connected = True
                logger.info(
                    f"Redis cache connected: {self.settings.redis_host}:{self.settings.redis_port}"
                )
            except (redis.ConnectionError, redis.TimeoutError) as e:
                logger.warning(
                    f"Redis connection failed: {e}. Cache disabled - falling back to database queries."
                )
                self._connected = False
                self.redis = None

    async def disconnect(self):
        """Close Redis connection (call on app shutdown)"""
        if self.redis:
            await self.redis.aclose()
            self._connected = False
            logger.info("Redis cache disconnected")

    def is_available(self) -> bool:
        """Check if Redis is connected and available"""
        return self._connected and self.redis is not None

    async def get(self, key: str) -> Any | None:
        """Get value from cache (deserialized from JSON) or None if not found/unavailable"""
        if not self.is_available() or self.redis is None:
            return None

        redis_client = self.redis  # Local variable for type narrowing
        try:
            value = await redis_client.get(key)
            if value:
                logger.debug(f"Cache HIT: {key}")
                return json.loads(value)
            logger.debug(f"Cache MISS: {key}")
            return None
        except Exception as e:
            logger.error(f"Cache get error for key {key}: {e}")
            return None

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        """Set value in cache with TTL; returns True if successful"""
        if not self.is_available() or self.redis is None:
            return False

        redis_client = self.redis  # Local variable for type narrowing
        try:
            serialized = json.dumps(value)
            await redis_client.setex(key, ttl, serialized)
            logger.debug(f"Cache SET: {key} (TTL: {ttl}s)")
            return True
        except Exception as e:
            logger.error(f"Cache set error for key {key}: {e}")
            return False

    async def delete(self, key: str) -> bool:
        """Delete key from cache; returns True if successful"""
        if not self.is_available() or self.redis is None:
            return False

        redis_client = self.redis  # Local variable for type narrowing
        try:
            await redis_client.delete(key)
            logger.debug(f"Cache DELETE: {key}")
            return True
        except Exception as e:
            logger.error(f"Cache delete error for key {key}: {e}")
            return False


class PrincipalCache:
    """
    Short-lived principal snapshots keyed by id.

    Entries are dropped whenever the subadmin gateway changes or deactivates
    an account, and expire after ``cache_ttl_principals`` otherwise.
    """

    prefix = "principal"

    def __init__(self, cache: CacheService, ttl: int | None = None):
        self.cache = cache
        self.ttl = ttl if ttl is not None else cache.settings.cache_ttl_principals

    def _key(self, principal_id: str) -> str:
        return f"{self.prefix}:{principal_id}"

    async def lookup(
        self,
        principal_id: str,
        loader: Callable[[str], Awaitable[Principal | None]],
    ) -> Principal | None:
        cached = await self.cache.get(self._key(principal_id))
        if cached is not None:
            return Principal.from_dict(cached)

        principal = await loader(principal_id)
        if principal is not None:
            await self.cache.set(self._key(principal_id), principal.to_dict(), ttl=self.ttl)
        return principal

    async def invalidate(self, principal_id: str) -> None:
        await self.cache.delete(self._key(principal_id))
