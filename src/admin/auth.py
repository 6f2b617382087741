"""Admin password check + Redis session management."""

from __future__ import annotations

import hmac
import json
import secrets
import time
from typing import Optional

import structlog
from redis.asyncio import Redis

logger = structlog.get_logger()

SESSION_TTL = 86400  # 24 hours
SESSION_PREFIX = "admin_session:"


def verify_admin_password(password: str, expected: str) -> bool:
    """Constant-time comparison of the submitted admin password."""
    if not password or not expected:
        return False
    return hmac.compare_digest(password.encode("utf-8"), expected.encode("utf-8"))


async def create_session(redis: Redis, client_host: str = "") -> str:
    """Create admin session in Redis.

    Args:
        redis: Redis client
        client_host: Address the login came from, kept for audit logs

    Returns:
        Session token (random string)
    """
    token = secrets.token_urlsafe(32)
    session_data = json.dumps({
        "created_at": int(time.time()),
        "client_host": client_host,
    })

    await redis.setex(
        f"{SESSION_PREFIX}{token}",
        SESSION_TTL,
        session_data,
    )

    logger.info("admin_session_created", client_host=client_host)
    return token


async def get_session(redis: Redis, token: str) -> Optional[dict]:
    """Get session data from Redis, None if missing or expired."""
    if not token:
        return None

    data = await redis.get(f"{SESSION_PREFIX}{token}")
    if not data:
        return None

    try:
        return json.loads(data)
    except (json.JSONDecodeError, TypeError):
        return None


async def delete_session(redis: Redis, token: str) -> None:
    """Delete admin session from Redis."""
    await redis.delete(f"{SESSION_PREFIX}{token}")
