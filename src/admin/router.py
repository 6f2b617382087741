"""Main admin router — login, logout, and the panel entry point."""

from __future__ import annotations

from typing import Optional

import structlog
from fastapi import APIRouter, Cookie, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from redis.asyncio import Redis

from src.admin.auth import create_session, delete_session, verify_admin_password
from src.admin.dependencies import get_admin_session
from src.admin.templating import templates
from src.config import settings
from src.redis_client import get_redis

logger = structlog.get_logger()

router = APIRouter(prefix="/admin", tags=["admin-panel"])


@router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request):
    """Show the password form, or go straight in when the panel is open."""
    if not settings.admin_password:
        return RedirectResponse(url="/admin/projects")
    return templates.TemplateResponse(request, "login.html")


@router.post("/login")
async def login(
    request: Request,
    password: str = Form(""),
    redis: Optional[Redis] = Depends(get_redis),
):
    """Check the admin password and create a session."""
    if not settings.admin_password:
        return RedirectResponse(url="/admin/projects", status_code=303)

    if not verify_admin_password(password, settings.admin_password):
        logger.warning("admin_login_invalid_password")
        return templates.TemplateResponse(request, "login.html", {
            "error": "Invalid password",
        }, status_code=401)

    if redis is None:
        logger.error("admin_login_no_session_store")
        return templates.TemplateResponse(request, "login.html", {
            "error": "Sessions are unavailable: Redis is not configured",
        }, status_code=503)

    client_host = request.client.host if request.client else ""
    token = await create_session(redis, client_host=client_host)

    response = RedirectResponse(url="/admin/projects", status_code=303)
    response.set_cookie(
        key="admin_token",
        value=token,
        httponly=True,
        secure=settings.environment != "development",
        samesite="lax",
        max_age=86400,  # 24 hours
    )

    logger.info("admin_login_success", client_host=client_host)
    return response


@router.get("/logout")
async def logout(
    admin_token: Optional[str] = Cookie(None),
    redis: Optional[Redis] = Depends(get_redis),
):
    """Clear session and redirect to login."""
    if admin_token and redis is not None:
        await delete_session(redis, admin_token)

    response = RedirectResponse(url="/admin/login", status_code=303)
    response.delete_cookie("admin_token")
    return response


@router.get("", response_class=HTMLResponse)
@router.get("/", response_class=HTMLResponse)
async def admin_root(
    session: Optional[dict] = Depends(get_admin_session),
):
    """Redirect to the first tab or login."""
    if session is None:
        return RedirectResponse(url="/admin/login")
    return RedirectResponse(url="/admin/projects")
