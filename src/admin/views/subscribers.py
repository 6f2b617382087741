"""Subscribers viewer — newsletter signups, newest first."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from src.admin.dependencies import get_admin_session
from src.admin.templating import templates
from src.dependencies import get_newsletter_service
from src.services.records import ListingError, NewsletterService

router = APIRouter(prefix="/admin/subscribers", tags=["admin-subscribers"])


@router.get("", response_class=HTMLResponse)
async def subscribers_page(
    request: Request,
    session: Optional[dict] = Depends(get_admin_session),
):
    if session is None:
        return RedirectResponse(url="/admin/login")
    return templates.TemplateResponse(request, "subscribers/index.html", {
        "active_page": "subscribers",
    })


@router.get("/list", response_class=HTMLResponse)
async def subscribers_list(
    request: Request,
    session: Optional[dict] = Depends(get_admin_session),
    service: NewsletterService = Depends(get_newsletter_service),
):
    """Subscribers table with total count (HTMX partial)."""
    if session is None:
        return HTMLResponse("Unauthorized", status_code=401)

    try:
        subscribers = await service.list_recent()
        error = None
    except ListingError:
        subscribers, error = [], "Failed to load subscribers"

    return templates.TemplateResponse(request, "subscribers/partials/table.html", {
        "subscribers": subscribers,
        "error": error,
    })
