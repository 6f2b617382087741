"""Tests for the Redis listing cache."""

import json
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from src.cache import CACHE_PREFIX, VERSION_PREFIX, ListCache


class TestListCache:
    @pytest.mark.asyncio
    async def test_miss_returns_none(self, list_cache):
        version = await list_cache.version("projects")
        assert version == 0
        assert await list_cache.get("projects", version) is None

    @pytest.mark.asyncio
    async def test_set_then_get(self, list_cache, mock_redis):
        rows = [{"id": "1", "name": "Acme"}]
        await list_cache.set("projects", 0, rows)

        mock_redis.setex.assert_called_once()
        key, ttl, payload = mock_redis.setex.call_args[0]
        assert key == f"{CACHE_PREFIX}projects:0"
        assert ttl == 60
        assert json.loads(payload) == rows
        assert await list_cache.get("projects", 0) == rows

    @pytest.mark.asyncio
    async def test_invalidate_moves_to_next_generation(self, list_cache, mock_redis):
        await list_cache.set("contacts", 0, [])
        await list_cache.invalidate("contacts")

        mock_redis.incr.assert_called_once_with(f"{VERSION_PREFIX}contacts")
        version = await list_cache.version("contacts")
        assert version == 1
        assert await list_cache.get("contacts", version) is None

    @pytest.mark.asyncio
    async def test_rows_read_before_invalidate_are_not_served(self, list_cache):
        version = await list_cache.version("projects")
        await list_cache.invalidate("projects")
        await list_cache.set("projects", version, [{"id": "stale"}])

        assert await list_cache.get("projects", await list_cache.version("projects")) is None

    @pytest.mark.asyncio
    async def test_disabled_cache_is_noop(self, no_cache):
        version = await no_cache.version("projects")
        assert version is None
        await no_cache.set("projects", version, [{"id": "1"}])
        await no_cache.invalidate("projects")
        assert await no_cache.get("projects", version) is None

    @pytest.mark.asyncio
    async def test_redis_errors_are_not_fatal(self):
        redis = AsyncMock()
        redis.get = AsyncMock(side_effect=RedisConnectionError("down"))
        redis.setex = AsyncMock(side_effect=RedisConnectionError("down"))
        redis.incr = AsyncMock(side_effect=RedisConnectionError("down"))
        cache = ListCache(redis)

        assert await cache.version("projects") is None
        assert await cache.get("projects", 0) is None
        await cache.set("projects", 0, [])
        await cache.invalidate("projects")

    @pytest.mark.asyncio
    async def test_corrupt_payload_is_a_miss(self, mock_redis, list_cache):
        mock_redis.store[f"{CACHE_PREFIX}clients:0"] = "{not json"
        assert await list_cache.get("clients", 0) is None
