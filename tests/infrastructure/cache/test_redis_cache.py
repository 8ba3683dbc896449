"""Tests for Redis cache service and principal cache"""

import json
from unittest.mock import AsyncMock, patch

import pytest
import redis.asyncio as redis

from listings.domain.entities.principal import PermissionVector, Principal
from listings.infrastructure.cache import CacheService, PrincipalCache
from listings.shared.enums import Role


@pytest.fixture
async def cache_service():
    """Create cache service with mock Redis client"""
    service = CacheService()
    service.redis = AsyncMock()
    service._connected = True
    return service


@pytest.fixture
async def disconnected_cache():
    service = CacheService()
    service.redis = None
    service._connected = False
    return service


@pytest.fixture
def principal():
    return Principal(
        id="sub-1",
        role=Role.SUBADMIN,
        permissions=PermissionVector(can_create=True),
        username="sub",
    )


async def test_cache_get_hit(cache_service):
    cache_service.redis.get = AsyncMock(return_value='{"id": "123"}')

    result = await cache_service.get("test_key")

    assert result == {"id": "123"}
    cache_service.redis.get.assert_called_once_with("test_key")


async def test_cache_set_serializes_with_ttl(cache_service):
    cache_service.redis.setex = AsyncMock()

    result = await cache_service.set("principal:1", {"role": "admin"}, ttl=60)

    assert result is True
    key, ttl, payload = cache_service.redis.setex.call_args[0]
    assert (key, ttl) == ("principal:1", 60)
    assert json.loads(payload) == {"role": "admin"}


async def test_cache_unavailable_is_a_miss(disconnected_cache):
    assert await disconnected_cache.get("any_key") is None
    assert await disconnected_cache.set("any_key", {"data": "value"}) is False
    assert await disconnected_cache.delete("any_key") is False


async def test_cache_error_on_get_is_a_miss(cache_service):
    cache_service.redis.get = AsyncMock(side_effect=redis.ConnectionError("gone"))

    assert await cache_service.get("test_key") is None


async def test_cache_connect_failure():
    """Test cache connection failure"""
    with patch("redis.asyncio.Redis") as mock_redis_class:
        mock_client = AsyncMock()
        mock_client.ping = AsyncMock(side_effect=redis.ConnectionError("Connection refused"))
        mock_redis_class.return_value = mock_client

        cache = CacheService()
        await cache.connect()

        assert cache.is_available() is False
        assert cache.redis is None


async def test_cache_disconnect(cache_service):
    client = cache_service.redis

    await cache_service.disconnect()

    client.aclose.assert_awaited_once()
    assert cache_service.is_available() is False


class TestPrincipalCache:
    async def test_miss_loads_and_stores(self, cache_service, principal):
        """
        GIVEN an empty cache
        WHEN a principal is looked up
        THEN the loader is called and its result is cached under principal:<id>.
        """
        cache_service.redis.get = AsyncMock(return_value=None)
        cache_service.redis.setex = AsyncMock()
        loader = AsyncMock(return_value=principal)

        result = await PrincipalCache(cache_service, ttl=30).lookup("sub-1", loader)

        assert result == principal
        loader.assert_awaited_once_with("sub-1")
        key, ttl, payload = cache_service.redis.setex.call_args[0]
        assert (key, ttl) == ("principal:sub-1", 30)
        assert json.loads(payload)["permissions"]["can_create"] is True

    async def test_hit_skips_loader(self, cache_service, principal):
        cache_service.redis.get = AsyncMock(return_value=json.dumps(principal.to_dict()))
        loader = AsyncMock()

        result = await PrincipalCache(cache_service).lookup("sub-1", loader)

        assert result == principal
        loader.assert_not_awaited()

    async def test_unknown_principal_is_not_cached(self, cache_service):
        cache_service.redis.get = AsyncMock(return_value=None)
        cache_service.redis.setex = AsyncMock()

        result = await PrincipalCache(cache_service).lookup("ghost", AsyncMock(return_value=None))

        assert result is None
        cache_service.redis.setex.assert_not_called()

    async def test_invalidate_deletes_key(self, cache_service):
        cache_service.redis.delete = AsyncMock()

        await PrincipalCache(cache_service).invalidate("sub-1")

        cache_service.redis.delete.assert_called_once_with("principal:sub-1")

    async def test_disconnected_cache_falls_back_to_loader(self, disconnected_cache, principal):
        loader = AsyncMock(return_value=principal)

        assert await PrincipalCache(disconnected_cache).lookup("sub-1", loader) == principal
        loader.assert_awaited_once()
