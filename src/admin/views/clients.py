"""Clients manager — add a testimonial (with photo) and list existing ones."""

from __future__ import annotations

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError

from src.admin.dependencies import get_admin_session
from src.admin.templating import templates
from src.dependencies import get_client_service
from src.forms import CLIENT_LABELS, field_errors, has_missing_fields
from src.schemas.client import ClientCreate
from src.services.records import ClientService, ListingError, SubmissionError
from src.storage import ImageStorage, get_storage

logger = structlog.get_logger()

router = APIRouter(prefix="/admin/clients", tags=["admin-clients"])

EMPTY_FORM = {"name": "", "designation": "", "description": ""}


def _render_page(request: Request, **context) -> HTMLResponse:
    return templates.TemplateResponse(request, "clients/index.html", {
        "active_page": "clients",
        "form": EMPTY_FORM,
        "errors": {},
        **context,
    })


@router.get("", response_class=HTMLResponse)
async def clients_page(
    request: Request,
    saved: Optional[str] = None,
    session: Optional[dict] = Depends(get_admin_session),
):
    """Add-client form; the listing is loaded as a partial."""
    if session is None:
        return RedirectResponse(url="/admin/login")
    return _render_page(request, saved=saved)


@router.get("/list", response_class=HTMLResponse)
async def clients_list(
    request: Request,
    session: Optional[dict] = Depends(get_admin_session),
    service: ClientService = Depends(get_client_service),
):
    """Existing clients, newest first (HTMX partial)."""
    if session is None:
        return HTMLResponse("Unauthorized", status_code=401)

    try:
        clients = await service.list_recent()
        error = None
    except ListingError:
        clients, error = [], "Failed to load clients"

    return templates.TemplateResponse(request, "clients/partials/list.html", {
        "clients": clients,
        "error": error,
    })


@router.post("", response_class=HTMLResponse)
async def create_client(
    request: Request,
    name: str = Form(""),
    designation: str = Form(""),
    description: str = Form(""),
    image: Optional[UploadFile] = File(None),
    session: Optional[dict] = Depends(get_admin_session),
    service: ClientService = Depends(get_client_service),
    storage: ImageStorage = Depends(get_storage),
):
    """Validate, upload the image, insert the client."""
    if session is None:
        return RedirectResponse(url="/admin/login", status_code=303)

    form = {"name": name, "designation": designation, "description": description}

    try:
        data = ClientCreate.model_validate(form)
    except ValidationError as e:
        errors = field_errors(e, CLIENT_LABELS)
        logger.info("client_form_invalid", fields=sorted(errors))
        return _render_page(
            request,
            form=form,
            errors=errors,
            error="Please fill all fields" if has_missing_fields(e) else None,
        )

    try:
        await service.create_client(data, image, storage)
    except SubmissionError as e:
        return _render_page(request, form=form, error=e.message)

    return RedirectResponse(url="/admin/clients?saved=1", status_code=303)
