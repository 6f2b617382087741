"""Landing page routes — sections, contact form and newsletter signup."""

import pathlib

import structlog
from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError

from src.config import settings
from src.dependencies import (
    get_client_service,
    get_contact_service,
    get_newsletter_service,
    get_project_service,
)
from src.forms import CONTACT_LABELS, NEWSLETTER_LABELS, field_errors
from src.schemas.contact import ContactCreate
from src.schemas.newsletter import SubscriberCreate
from src.services.records import (
    ClientService,
    ContactService,
    DuplicateSubscriberError,
    ListingError,
    NewsletterService,
    ProjectService,
    SubmissionError,
)

logger = structlog.get_logger()

router = APIRouter(tags=["landing"])

TEMPLATES_DIR = pathlib.Path(__file__).parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

EMPTY_CONTACT = {"full_name": "", "email": "", "mobile": "", "city": ""}

PROJECTS_LOAD_ERROR = "Failed to load projects."
CLIENTS_LOAD_ERROR = "Failed to load testimonials."


async def get_showcase(
    request: Request,
    projects: ProjectService = Depends(get_project_service),
    clients: ClientService = Depends(get_client_service),
) -> dict:
    """Listings for a full-page render. HTMX requests only swap one section."""
    if request.headers.get("HX-Request"):
        return {}

    showcase = {"projects_error": None, "clients_error": None}
    try:
        showcase["projects"] = await projects.list_recent()
    except ListingError:
        showcase["projects"], showcase["projects_error"] = [], PROJECTS_LOAD_ERROR
    try:
        showcase["clients"] = await clients.list_recent()
    except ListingError:
        showcase["clients"], showcase["clients_error"] = [], CLIENTS_LOAD_ERROR
    return showcase


def _render_section(
    request: Request, partial: str, context: dict, showcase: dict
) -> HTMLResponse:
    """HTMX requests get the section alone, plain form posts the whole page."""
    if request.headers.get("HX-Request"):
        return templates.TemplateResponse(request, f"partials/{partial}.html", context)
    return templates.TemplateResponse(request, "index.html", {
        "site_name": settings.site_name,
        **showcase,
        **context,
    })


@router.get("/", response_class=HTMLResponse)
async def landing_page(request: Request, showcase: dict = Depends(get_showcase)):
    """Serve the landing page with both listings rendered in place."""
    return templates.TemplateResponse(request, "index.html", {
        "site_name": settings.site_name,
        **showcase,
    })


@router.get("/sections/projects", response_class=HTMLResponse)
async def projects_section(
    request: Request,
    service: ProjectService = Depends(get_project_service),
):
    """Projects showcase, newest first."""
    try:
        projects = await service.list_recent()
        error = None
    except ListingError:
        projects, error = [], PROJECTS_LOAD_ERROR

    return templates.TemplateResponse(request, "partials/projects.html", {
        "projects": projects,
        "error": error,
    })


@router.get("/sections/clients", response_class=HTMLResponse)
async def clients_section(
    request: Request,
    service: ClientService = Depends(get_client_service),
):
    """Client testimonials, newest first."""
    try:
        clients = await service.list_recent()
        error = None
    except ListingError:
        clients, error = [], CLIENTS_LOAD_ERROR

    return templates.TemplateResponse(request, "partials/clients.html", {
        "clients": clients,
        "error": error,
    })


@router.get("/sections/contact", response_class=HTMLResponse)
async def contact_section(request: Request):
    """Empty contact form (used by "Send another message")."""
    return templates.TemplateResponse(request, "partials/contact.html", {
        "contact_form": EMPTY_CONTACT,
    })


@router.post("/contact", response_class=HTMLResponse)
async def submit_contact(
    request: Request,
    full_name: str = Form(""),
    email: str = Form(""),
    mobile: str = Form(""),
    city: str = Form(""),
    service: ContactService = Depends(get_contact_service),
    showcase: dict = Depends(get_showcase),
):
    """Validate and store a contact form submission."""
    form = {"full_name": full_name, "email": email, "mobile": mobile, "city": city}

    try:
        data = ContactCreate.model_validate(form)
    except ValidationError as e:
        errors = field_errors(
            e, CONTACT_LABELS, {"email": "Invalid email address"}
        )
        logger.info("contact_validation_failed", fields=sorted(errors))
        return _render_section(request, "contact", {
            "contact_form": form,
            "contact_errors": errors,
        }, showcase)

    try:
        await service.submit(data)
    except SubmissionError as e:
        return _render_section(request, "contact", {
            "contact_form": form,
            "contact_error": e.message,
        }, showcase)

    return _render_section(request, "contact", {
        "contact_form": EMPTY_CONTACT,
        "contact_submitted": True,
    }, showcase)


@router.get("/sections/newsletter", response_class=HTMLResponse)
async def newsletter_section(request: Request):
    """Empty newsletter form (used by "Subscribe another email")."""
    return templates.TemplateResponse(request, "partials/newsletter.html", {
        "newsletter_email": "",
    })


@router.post("/newsletter", response_class=HTMLResponse)
async def subscribe_newsletter(
    request: Request,
    email: str = Form(""),
    service: NewsletterService = Depends(get_newsletter_service),
    showcase: dict = Depends(get_showcase),
):
    """Subscribe an email to the newsletter."""
    try:
        data = SubscriberCreate.model_validate({"email": email})
    except ValidationError as e:
        errors = field_errors(
            e, NEWSLETTER_LABELS, {"email": "Please enter a valid email address"}
        )
        return _render_section(request, "newsletter", {
            "newsletter_email": email,
            "newsletter_field_error": errors.get("email"),
        }, showcase)

    try:
        await service.subscribe(data)
    except DuplicateSubscriberError as e:
        return _render_section(request, "newsletter", {
            "newsletter_email": email,
            "newsletter_error": e.message,
            "newsletter_duplicate": True,
        }, showcase)
    except SubmissionError as e:
        return _render_section(request, "newsletter", {
            "newsletter_email": email,
            "newsletter_error": e.message,
        }, showcase)

    return _render_section(request, "newsletter", {
        "newsletter_email": "",
        "newsletter_subscribed": True,
    }, showcase)
