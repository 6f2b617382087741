"""Contacts viewer — contact form submissions, newest first."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from src.admin.dependencies import get_admin_session
from src.admin.templating import templates
from src.dependencies import get_contact_service
from src.services.records import ContactService, ListingError

router = APIRouter(prefix="/admin/contacts", tags=["admin-contacts"])


@router.get("", response_class=HTMLResponse)
async def contacts_page(
    request: Request,
    session: Optional[dict] = Depends(get_admin_session),
):
    if session is None:
        return RedirectResponse(url="/admin/login")
    return templates.TemplateResponse(request, "contacts/index.html", {
        "active_page": "contacts",
    })


@router.get("/list", response_class=HTMLResponse)
async def contacts_list(
    request: Request,
    session: Optional[dict] = Depends(get_admin_session),
    service: ContactService = Depends(get_contact_service),
):
    """Submissions table (HTMX partial)."""
    if session is None:
        return HTMLResponse("Unauthorized", status_code=401)

    try:
        contacts = await service.list_recent()
        error = None
    except ListingError:
        contacts, error = [], "Failed to load contact submissions"

    return templates.TemplateResponse(request, "contacts/partials/table.html", {
        "contacts": contacts,
        "error": error,
    })
