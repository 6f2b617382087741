"""Record services — the list/insert operations behind every form and listing.

Each service owns one table:
- ``list_recent`` returns all rows newest first, served from the listing
  cache when possible;
- ``create`` performs exactly one insert, commits it and drops the cached
  listing so every dependent view re-queries.

Backend failures are turned into ``SubmissionError`` / ``ListingError``
carrying the user-facing message.
"""

from __future__ import annotations

from typing import Generic, List, Optional, Type, TypeVar

import structlog
from fastapi import UploadFile
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.cache import ListCache
from src.notifications.telegram import ContactNotifier
from src.repositories.base import RecordRepository
from src.repositories.client import ClientRepository
from src.repositories.contact import ContactRepository
from src.repositories.newsletter import SubscriberRepository
from src.repositories.project import ProjectRepository
from src.schemas.client import ClientCreate, ClientResponse
from src.schemas.contact import ContactCreate, ContactResponse
from src.schemas.newsletter import SubscriberCreate, SubscriberResponse
from src.schemas.project import ProjectCreate, ProjectResponse
from src.storage import (
    CLIENTS_FOLDER,
    PROJECTS_FOLDER,
    ImageStorage,
    StorageError,
    upload_image,
)

logger = structlog.get_logger()

ResponseT = TypeVar("ResponseT", bound=BaseModel)

UPLOAD_FAILED_MESSAGE = "Failed to upload image"
DUPLICATE_SUBSCRIBER_MESSAGE = "This email is already subscribed"


class SubmissionError(Exception):
    """An insert could not be completed. ``message`` is safe to show users."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DuplicateSubscriberError(SubmissionError):
    def __init__(self, message: str = DUPLICATE_SUBSCRIBER_MESSAGE):
        super().__init__(message)


class ListingError(Exception):
    """A listing query failed."""


class RecordService(Generic[ResponseT]):
    """List and create rows of one table."""

    repository_class: Type[RecordRepository]
    response_schema: Type[ResponseT]
    failure_message = "Failed to save. Please try again."

    def __init__(self, db: AsyncSession, cache: ListCache):
        self.db = db
        self.cache = cache
        self.repository = self.repository_class(db)

    @property
    def table(self) -> str:
        return self.repository.table

    async def list_recent(self) -> List[ResponseT]:
        version = await self.cache.version(self.table)
        cached = await self.cache.get(self.table, version)
        if cached is not None:
            return [self.response_schema.model_validate(row) for row in cached]

        try:
            rows = await self.repository.list_recent()
        except SQLAlchemyError as e:
            logger.error("listing_failed", table=self.table, error=str(e))
            raise ListingError(self.table) from e

        items = [self.response_schema.model_validate(row) for row in rows]
        await self.cache.set(
            self.table, version, [item.model_dump(mode="json") for item in items]
        )
        return items

    async def create(self, data: BaseModel) -> ResponseT:
        """Insert one row from validated data and commit it."""
        try:
            row = await self.repository.create(**data.model_dump())
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise self.conflict_error(e) from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("insert_failed", table=self.table, error=str(e))
            raise SubmissionError(self.failure_message) from e

        await self.cache.invalidate(self.table)
        return self.response_schema.model_validate(row)

    def conflict_error(self, exc: IntegrityError) -> SubmissionError:
        logger.error("insert_conflict", table=self.table, error=str(exc))
        return SubmissionError(self.failure_message)


class ImageRecordService(RecordService[ResponseT]):
    """Records with an optional image uploaded before the insert."""

    folder: str

    async def create_with_image(
        self,
        data: BaseModel,
        image: Optional[UploadFile],
        storage: ImageStorage,
    ) -> ResponseT:
        """Upload the image (if any), then insert the row pointing at it.

        An upload failure aborts before anything is inserted.
        """
        if image is not None and image.filename:
            try:
                image_url = await upload_image(storage, self.folder, image)
            except StorageError as e:
                logger.error("image_upload_failed", table=self.table, error=str(e))
                raise SubmissionError(UPLOAD_FAILED_MESSAGE) from e
            data = data.model_copy(update={"image_url": image_url})

        return await self.create(data)


class ProjectService(ImageRecordService[ProjectResponse]):
    repository_class = ProjectRepository
    response_schema = ProjectResponse
    failure_message = "Failed to add project"
    folder = PROJECTS_FOLDER

    async def create_project(
        self,
        data: ProjectCreate,
        image: Optional[UploadFile],
        storage: ImageStorage,
    ) -> ProjectResponse:
        project = await self.create_with_image(data, image, storage)
        logger.info("project_created", id=str(project.id), name=project.name)
        return project


class ClientService(ImageRecordService[ClientResponse]):
    repository_class = ClientRepository
    response_schema = ClientResponse
    failure_message = "Failed to add client"
    folder = CLIENTS_FOLDER

    async def create_client(
        self,
        data: ClientCreate,
        image: Optional[UploadFile],
        storage: ImageStorage,
    ) -> ClientResponse:
        client = await self.create_with_image(data, image, storage)
        logger.info("client_created", id=str(client.id), name=client.name)
        return client


class ContactService(RecordService[ContactResponse]):
    repository_class = ContactRepository
    response_schema = ContactResponse
    failure_message = "Failed to send message. Please try again."

    def __init__(
        self,
        db: AsyncSession,
        cache: ListCache,
        notifier: Optional[ContactNotifier] = None,
    ):
        super().__init__(db, cache)
        self.notifier = notifier

    async def submit(self, data: ContactCreate) -> ContactResponse:
        contact = await self.create(data)
        logger.info("contact_created", id=str(contact.id), city=contact.city)

        if self.notifier is not None:
            await self.notifier.send_contact_notification(contact)
        return contact


class NewsletterService(RecordService[SubscriberResponse]):
    repository_class = SubscriberRepository
    response_schema = SubscriberResponse
    failure_message = "Failed to subscribe. Please try again."

    def conflict_error(self, exc: IntegrityError) -> SubmissionError:
        # The only constraint on this table is the unique email
        logger.info("newsletter_duplicate")
        return DuplicateSubscriberError()

    async def subscribe(self, data: SubscriberCreate) -> SubscriberResponse:
        subscriber = await self.create(data)
        logger.info("newsletter_subscribed", id=str(subscriber.id))
        return subscriber
