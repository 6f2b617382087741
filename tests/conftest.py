"""Test fixtures and configuration."""

import os
import tempfile

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("REDIS_URL", "")
os.environ.setdefault("ADMIN_PASSWORD", "")
os.environ.setdefault("STORAGE_BACKEND", "local")
os.environ.setdefault("MEDIA_ROOT", tempfile.mkdtemp(prefix="media-"))
os.environ.setdefault("NOTIFY_TELEGRAM_BOT_TOKEN", "")

import httpx
import pytest
import pytest_asyncio
from unittest.mock import AsyncMock
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.cache import ListCache
from src.database import get_db
from src.dependencies import get_contact_notifier
from src.main import app
from src.models import Base
from src.notifications.telegram import ContactNotifier
from src.redis_client import get_redis
from src.storage import LocalImageStorage, get_storage


@pytest.fixture
def mock_redis():
    """Mock Redis client backed by a dict."""
    store = {}

    def incr(key):
        store[key] = int(store.get(key, 0)) + 1
        return store[key]

    redis = AsyncMock()
    redis.get = AsyncMock(side_effect=lambda key: store.get(key))
    redis.setex = AsyncMock(side_effect=lambda key, ttl, value: store.__setitem__(key, value))
    redis.delete = AsyncMock(side_effect=lambda key: store.pop(key, None))
    redis.incr = AsyncMock(side_effect=incr)
    redis.store = store
    return redis


@pytest.fixture
def list_cache(mock_redis):
    return ListCache(mock_redis, ttl_seconds=60)


@pytest.fixture
def no_cache():
    return ListCache(None)


@pytest_asyncio.fixture
async def db_engine():
    """In-memory SQLite database with all tables."""
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def storage(tmp_path):
    """Local image storage in a temp dir."""
    return LocalImageStorage(root=tmp_path / "media", base_url="http://testserver/media")


@pytest_asyncio.fixture
async def client(session_factory, storage):
    """HTTP client against the app with test database and storage, cache disabled."""

    async def override_get_db():
        async with session_factory() as session:
            yield session
            await session.commit()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = lambda: None
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_contact_notifier] = lambda: ContactNotifier("", "")

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()
