"""Tests for record services — inserts, ordered listings, cache invalidation."""

import io
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError
from starlette.datastructures import Headers, UploadFile

from src.cache import CACHE_PREFIX, VERSION_PREFIX
from src.models import NewsletterSubscriber, Project
from src.schemas.contact import ContactCreate
from src.schemas.newsletter import SubscriberCreate
from src.schemas.project import ProjectCreate
from src.services.records import (
    ContactService,
    DuplicateSubscriberError,
    ListingError,
    NewsletterService,
    ProjectService,
    SubmissionError,
)
from src.storage import StorageError


def image_upload(filename: str = "logo.png") -> UploadFile:
    return UploadFile(
        file=io.BytesIO(b"\x89PNG fake"),
        filename=filename,
        headers=Headers({"content-type": "image/png"}),
    )


async def count_rows(session, model) -> int:
    return (await session.execute(select(func.count()).select_from(model))).scalar_one()


class TestListing:
    @pytest.mark.asyncio
    async def test_empty_table(self, db_session, no_cache):
        service = ProjectService(db_session, no_cache)
        assert await service.list_recent() == []

    @pytest.mark.asyncio
    async def test_newest_first(self, db_session, no_cache):
        service = ProjectService(db_session, no_cache)
        for name in ("First", "Second", "Third"):
            await service.create(ProjectCreate(name=name, description="Desc"))

        names = [p.name for p in await service.list_recent()]
        assert names == ["Third", "Second", "First"]

    @pytest.mark.asyncio
    async def test_listing_is_cached(self, db_session, list_cache, mock_redis):
        service = ProjectService(db_session, list_cache)
        await service.create(ProjectCreate(name="Acme", description="Desc"))

        first = await service.list_recent()
        assert f"{CACHE_PREFIX}projects:0" in mock_redis.store

        # Served from the cache, no query needed
        service.repository.list_recent = AsyncMock(side_effect=AssertionError("queried"))
        second = await service.list_recent()
        assert second == first

    @pytest.mark.asyncio
    async def test_insert_is_reflected_after_refresh(self, db_session, list_cache):
        service = ContactService(db_session, list_cache)
        assert await service.list_recent() == []

        await service.submit(ContactCreate(
            full_name="Jane Doe", email="jane@example.com", mobile="123", city="Boston",
        ))

        contacts = await service.list_recent()
        assert [c.full_name for c in contacts] == ["Jane Doe"]

    @pytest.mark.asyncio
    async def test_slow_reader_does_not_cache_stale_rows(self, session_factory, list_cache):
        async with session_factory() as reader_session, session_factory() as writer_session:
            reader = ProjectService(reader_session, list_cache)
            writer = ProjectService(writer_session, list_cache)
            query = reader.repository.list_recent

            async def query_then_insert():
                rows = await query()
                await writer.create(ProjectCreate(name="Acme", description="Desc"))
                return rows

            # The insert lands between the reader's query and its cache write
            reader.repository.list_recent = query_then_insert
            assert await reader.list_recent() == []

            reader.repository.list_recent = query
            assert [p.name for p in await reader.list_recent()] == ["Acme"]

    @pytest.mark.asyncio
    async def test_read_failure_raises_listing_error(self, db_session, no_cache):
        service = ProjectService(db_session, no_cache)
        service.repository.list_recent = AsyncMock(
            side_effect=OperationalError("SELECT", {}, Exception("db down"))
        )
        with pytest.raises(ListingError):
            await service.list_recent()


class TestSubmission:
    @pytest.mark.asyncio
    async def test_insert_failure_is_generic(self, db_session, no_cache):
        service = ContactService(db_session, no_cache)
        service.repository.create = AsyncMock(
            side_effect=OperationalError("INSERT", {}, Exception("db down"))
        )
        with pytest.raises(SubmissionError) as exc_info:
            await service.submit(ContactCreate(
                full_name="Jane", email="jane@example.com", mobile="1", city="X",
            ))
        assert exc_info.value.message == "Failed to send message. Please try again."

    @pytest.mark.asyncio
    async def test_contact_notifies_owner(self, db_session, no_cache):
        notifier = AsyncMock()
        service = ContactService(db_session, no_cache, notifier)
        contact = await service.submit(ContactCreate(
            full_name="Jane", email="jane@example.com", mobile="1", city="X",
        ))
        notifier.send_contact_notification.assert_awaited_once_with(contact)

    @pytest.mark.asyncio
    async def test_newsletter_duplicate(self, db_session, no_cache):
        service = NewsletterService(db_session, no_cache)
        await service.subscribe(SubscriberCreate(email="jane@example.com"))

        with pytest.raises(DuplicateSubscriberError) as exc_info:
            await service.subscribe(SubscriberCreate(email="JANE@example.com"))

        assert exc_info.value.message == "This email is already subscribed"
        assert await count_rows(db_session, NewsletterSubscriber) == 1

    @pytest.mark.asyncio
    async def test_session_usable_after_duplicate(self, db_session, no_cache):
        service = NewsletterService(db_session, no_cache)
        await service.subscribe(SubscriberCreate(email="a@example.com"))
        with pytest.raises(DuplicateSubscriberError):
            await service.subscribe(SubscriberCreate(email="a@example.com"))

        await service.subscribe(SubscriberCreate(email="b@example.com"))
        emails = [s.email for s in await service.list_recent()]
        assert emails == ["b@example.com", "a@example.com"]

    @pytest.mark.asyncio
    async def test_insert_invalidates_cache(self, db_session, list_cache, mock_redis):
        service = NewsletterService(db_session, list_cache)
        assert await service.list_recent() == []
        assert f"{CACHE_PREFIX}newsletter_subscribers:0" in mock_redis.store

        await service.subscribe(SubscriberCreate(email="new@example.com"))
        mock_redis.incr.assert_called_with(f"{VERSION_PREFIX}newsletter_subscribers")
        emails = [s.email for s in await service.list_recent()]
        assert emails == ["new@example.com"]


class TestImageSubmission:
    @pytest.mark.asyncio
    async def test_project_with_image(self, db_session, no_cache, storage):
        service = ProjectService(db_session, no_cache)
        project = await service.create_project(
            ProjectCreate(name="Acme", description="Desc"), image_upload(), storage,
        )

        stored = list((storage.root / "projects").iterdir())
        assert len(stored) == 1
        assert project.image_url == storage.get_public_url(f"projects/{stored[0].name}")
        assert await count_rows(db_session, Project) == 1

    @pytest.mark.asyncio
    async def test_project_without_image(self, db_session, no_cache, storage):
        service = ProjectService(db_session, no_cache)
        project = await service.create_project(
            ProjectCreate(name="Acme", description="Desc"), None, storage,
        )
        assert project.image_url is None

    @pytest.mark.asyncio
    async def test_upload_failure_aborts_before_insert(self, db_session, no_cache, storage):
        storage.upload = AsyncMock(side_effect=StorageError("bucket unavailable"))
        service = ProjectService(db_session, no_cache)

        with pytest.raises(SubmissionError) as exc_info:
            await service.create_project(
                ProjectCreate(name="Acme", description="Desc"), image_upload(), storage,
            )

        assert exc_info.value.message == "Failed to upload image"
        assert await count_rows(db_session, Project) == 0
