"""FastAPI dependencies for admin panel access."""

from __future__ import annotations

from typing import Optional

import structlog
from fastapi import Cookie, Depends
from redis.asyncio import Redis

from src.admin.auth import get_session
from src.config import settings
from src.redis_client import get_redis

logger = structlog.get_logger()

OPEN_SESSION = {"open": True}


async def get_admin_session(
    admin_token: Optional[str] = Cookie(None),
    redis: Optional[Redis] = Depends(get_redis),
) -> Optional[dict]:
    """Get the current admin session from the session cookie.

    Without a configured admin password the panel is open and every
    request gets a session. Returns None if not authenticated (views
    should redirect to login).
    """
    if not settings.admin_password:
        return OPEN_SESSION

    if not admin_token or redis is None:
        return None

    return await get_session(redis, admin_token)
