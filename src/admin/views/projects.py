"""Projects manager — add a project (with image) and list existing ones."""

from __future__ import annotations

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError

from src.admin.dependencies import get_admin_session
from src.admin.templating import templates
from src.dependencies import get_project_service
from src.forms import PROJECT_LABELS, field_errors, has_missing_fields
from src.schemas.project import ProjectCreate
from src.services.records import ListingError, ProjectService, SubmissionError
from src.storage import ImageStorage, get_storage

logger = structlog.get_logger()

router = APIRouter(prefix="/admin/projects", tags=["admin-projects"])

EMPTY_FORM = {"name": "", "description": ""}


def _render_page(request: Request, **context) -> HTMLResponse:
    return templates.TemplateResponse(request, "projects/index.html", {
        "active_page": "projects",
        "form": EMPTY_FORM,
        "errors": {},
        **context,
    })


@router.get("", response_class=HTMLResponse)
async def projects_page(
    request: Request,
    saved: Optional[str] = None,
    session: Optional[dict] = Depends(get_admin_session),
):
    """Add-project form; the listing is loaded as a partial."""
    if session is None:
        return RedirectResponse(url="/admin/login")
    return _render_page(request, saved=saved)


@router.get("/list", response_class=HTMLResponse)
async def projects_list(
    request: Request,
    session: Optional[dict] = Depends(get_admin_session),
    service: ProjectService = Depends(get_project_service),
):
    """Existing projects, newest first (HTMX partial)."""
    if session is None:
        return HTMLResponse("Unauthorized", status_code=401)

    try:
        projects = await service.list_recent()
        error = None
    except ListingError:
        projects, error = [], "Failed to load projects"

    return templates.TemplateResponse(request, "projects/partials/list.html", {
        "projects": projects,
        "error": error,
    })


@router.post("", response_class=HTMLResponse)
async def create_project(
    request: Request,
    name: str = Form(""),
    description: str = Form(""),
    image: Optional[UploadFile] = File(None),
    session: Optional[dict] = Depends(get_admin_session),
    service: ProjectService = Depends(get_project_service),
    storage: ImageStorage = Depends(get_storage),
):
    """Validate, upload the image, insert the project."""
    if session is None:
        return RedirectResponse(url="/admin/login", status_code=303)

    form = {"name": name, "description": description}

    try:
        data = ProjectCreate.model_validate(form)
    except ValidationError as e:
        errors = field_errors(e, PROJECT_LABELS)
        logger.info("project_form_invalid", fields=sorted(errors))
        return _render_page(
            request,
            form=form,
            errors=errors,
            error="Please fill all fields" if has_missing_fields(e) else None,
        )

    try:
        await service.create_project(data, image, storage)
    except SubmissionError as e:
        return _render_page(request, form=form, error=e.message)

    return RedirectResponse(url="/admin/projects?saved=1", status_code=303)
