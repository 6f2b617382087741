"""FastAPI dependencies wiring sessions, cache and storage into services."""

from __future__ import annotations

from typing import Optional

from fastapi import Depends
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from src.cache import ListCache
from src.database import get_db
from src.notifications.telegram import ContactNotifier, get_notifier
from src.redis_client import get_redis
from src.services.records import (
    ClientService,
    ContactService,
    NewsletterService,
    ProjectService,
)


async def get_list_cache(redis: Optional[Redis] = Depends(get_redis)) -> ListCache:
    return ListCache(redis)


async def get_contact_notifier() -> ContactNotifier:
    return get_notifier()


async def get_project_service(
    db: AsyncSession = Depends(get_db),
    cache: ListCache = Depends(get_list_cache),
) -> ProjectService:
    return ProjectService(db, cache)


async def get_client_service(
    db: AsyncSession = Depends(get_db),
    cache: ListCache = Depends(get_list_cache),
) -> ClientService:
    return ClientService(db, cache)


async def get_contact_service(
    db: AsyncSession = Depends(get_db),
    cache: ListCache = Depends(get_list_cache),
    notifier: ContactNotifier = Depends(get_contact_notifier),
) -> ContactService:
    return ContactService(db, cache, notifier)


async def get_newsletter_service(
    db: AsyncSession = Depends(get_db),
    cache: ListCache = Depends(get_list_cache),
) -> NewsletterService:
    return NewsletterService(db, cache)
