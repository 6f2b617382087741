"""Records API — JSON list/create for projects, clients, contacts and subscribers."""

from typing import Any, Dict

import structlog
from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from src.dependencies import (
    get_client_service,
    get_contact_service,
    get_newsletter_service,
    get_project_service,
)
from src.forms import (
    CLIENT_LABELS,
    CONTACT_LABELS,
    NEWSLETTER_LABELS,
    PROJECT_LABELS,
    field_errors,
)
from src.schemas.client import ClientCreate, ClientResponse
from src.schemas.contact import ContactCreate, ContactResponse
from src.schemas.newsletter import SubscriberCreate, SubscriberResponse
from src.schemas.project import ProjectCreate, ProjectResponse
from src.services.records import (
    ClientService,
    ContactService,
    DuplicateSubscriberError,
    ListingError,
    NewsletterService,
    ProjectService,
    SubmissionError,
)
from src.storage import ImageStorage, get_storage

logger = structlog.get_logger()

router = APIRouter(prefix="/api/v1", tags=["records"])

FOREIGN_IMAGE_MESSAGE = "Image URL must point at an uploaded image"


def _validation_response(errors: Dict[str, str]) -> JSONResponse:
    return JSONResponse(status_code=422, content={"errors": errors})


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _image_errors(data, storage: ImageStorage) -> Dict[str, str]:
    """Rows may only reference images uploaded to this site's storage."""
    if data.image_url and not storage.serves_url(data.image_url):
        logger.info("foreign_image_url_rejected", url=data.image_url)
        return {"image_url": FOREIGN_IMAGE_MESSAGE}
    return {}


async def _list(service, what: str):
    try:
        items = await service.list_recent()
    except ListingError:
        return _error_response(500, f"Failed to load {what}")
    return {"items": [item.model_dump(mode="json") for item in items], "total": len(items)}


@router.get("/projects")
async def list_projects(service: ProjectService = Depends(get_project_service)):
    """All projects, newest first.

    Returns:
        {"items": [...], "total": int}
    """
    return await _list(service, "projects")


@router.post("/projects", status_code=201, response_model=ProjectResponse)
async def create_project(
    payload: Dict[str, Any] = Body(...),
    service: ProjectService = Depends(get_project_service),
    storage: ImageStorage = Depends(get_storage),
):
    """Create a project. ``image_url`` must point at an image in this site's storage."""
    try:
        data = ProjectCreate.model_validate(payload)
    except ValidationError as e:
        return _validation_response(field_errors(e, PROJECT_LABELS))

    errors = _image_errors(data, storage)
    if errors:
        return _validation_response(errors)

    try:
        return await service.create(data)
    except SubmissionError as e:
        return _error_response(500, e.message)


@router.get("/clients")
async def list_clients(service: ClientService = Depends(get_client_service)):
    """All client testimonials, newest first."""
    return await _list(service, "clients")


@router.post("/clients", status_code=201, response_model=ClientResponse)
async def create_client(
    payload: Dict[str, Any] = Body(...),
    service: ClientService = Depends(get_client_service),
    storage: ImageStorage = Depends(get_storage),
):
    try:
        data = ClientCreate.model_validate(payload)
    except ValidationError as e:
        return _validation_response(field_errors(e, CLIENT_LABELS))

    errors = _image_errors(data, storage)
    if errors:
        return _validation_response(errors)

    try:
        return await service.create(data)
    except SubmissionError as e:
        return _error_response(500, e.message)


@router.get("/contacts")
async def list_contacts(service: ContactService = Depends(get_contact_service)):
    """All contact submissions, newest first."""
    return await _list(service, "contacts")


@router.post("/contacts", status_code=201, response_model=ContactResponse)
async def submit_contact(
    payload: Dict[str, Any] = Body(...),
    service: ContactService = Depends(get_contact_service),
):
    """Store a contact submission (same rules as the landing page form)."""
    try:
        data = ContactCreate.model_validate(payload)
    except ValidationError as e:
        return _validation_response(
            field_errors(e, CONTACT_LABELS, {"email": "Invalid email address"})
        )

    try:
        return await service.submit(data)
    except SubmissionError as e:
        return _error_response(500, e.message)


@router.get("/newsletter")
async def list_subscribers(service: NewsletterService = Depends(get_newsletter_service)):
    """All newsletter subscribers, newest first."""
    return await _list(service, "subscribers")


@router.post("/newsletter", status_code=201, response_model=SubscriberResponse)
async def subscribe(
    payload: Dict[str, Any] = Body(...),
    service: NewsletterService = Depends(get_newsletter_service),
):
    """Subscribe an email. 409 if it is already subscribed."""
    try:
        data = SubscriberCreate.model_validate(payload)
    except ValidationError as e:
        return _validation_response(
            field_errors(e, NEWSLETTER_LABELS, {"email": "Please enter a valid email address"})
        )

    try:
        return await service.subscribe(data)
    except DuplicateSubscriberError as e:
        return _error_response(409, e.message)
    except SubmissionError as e:
        return _error_response(500, e.message)


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok", "version": "0.1.0"}
