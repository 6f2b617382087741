"""Listing cache — Redis copy of each table's newest-first rows.

Every table has a generation counter. Cached rows are stored under the
generation that was current before the database was queried, and an insert
bumps the counter, so rows read before the insert can never be served after
it.
"""

from __future__ import annotations

import json
from typing import List, Optional

import structlog
from redis.asyncio import Redis
from redis.exceptions import RedisError

from src.config import settings

logger = structlog.get_logger()

CACHE_PREFIX = "list_cache:"
VERSION_PREFIX = "list_cache_version:"


class ListCache:
    """Caches serialized listings per table. A None client disables caching."""

    def __init__(self, redis: Optional[Redis], ttl_seconds: Optional[int] = None):
        self.redis = redis
        self.ttl_seconds = ttl_seconds or settings.list_cache_ttl_seconds

    @staticmethod
    def _key(table: str, version: int) -> str:
        return f"{CACHE_PREFIX}{table}:{version}"

    @staticmethod
    def _version_key(table: str) -> str:
        return f"{VERSION_PREFIX}{table}"

    async def version(self, table: str) -> Optional[int]:
        """Current generation of the table's listing, None when uncacheable.

        Read it before querying the database and pass it to get/set.
        """
        if self.redis is None:
            return None
        try:
            data = await self.redis.get(self._version_key(table))
        except RedisError as e:
            logger.warning("list_cache_error", op="version", table=table, error=str(e))
            return None
        try:
            return int(data or 0)
        except (TypeError, ValueError):
            return None

    async def get(self, table: str, version: Optional[int]) -> Optional[List[dict]]:
        """Return cached rows or None on a miss."""
        if self.redis is None or version is None:
            return None
        try:
            data = await self.redis.get(self._key(table, version))
        except RedisError as e:
            logger.warning("list_cache_error", op="get", table=table, error=str(e))
            return None
        if not data:
            return None
        try:
            return json.loads(data)
        except (json.JSONDecodeError, TypeError):
            return None

    async def set(self, table: str, version: Optional[int], rows: List[dict]) -> None:
        if self.redis is None or version is None:
            return
        try:
            await self.redis.setex(
                self._key(table, version), self.ttl_seconds, json.dumps(rows)
            )
        except RedisError as e:
            logger.warning("list_cache_error", op="set", table=table, error=str(e))

    async def invalidate(self, table: str) -> None:
        """Move the table to a new generation; older entries expire unused."""
        if self.redis is None:
            return
        try:
            version = await self.redis.incr(self._version_key(table))
        except RedisError as e:
            logger.warning("list_cache_error", op="invalidate", table=table, error=str(e))
        else:
            logger.debug("list_cache_invalidated", table=table, version=version)
