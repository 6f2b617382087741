"""FastAPI application entry point."""

import logging
import pathlib
import structlog
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from src.api.v1.records import router as records_router
from src.admin.router import router as admin_panel_router
from src.admin.views.projects import router as admin_projects_router
from src.admin.views.clients import router as admin_clients_router
from src.admin.views.contacts import router as admin_contacts_router
from src.admin.views.subscribers import router as admin_subscribers_router
from src.config import settings
from src.landing.router import router as landing_router

structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.dev.ConsoleRenderer() if settings.environment == "development"
        else structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(
        getattr(logging, settings.log_level.upper(), logging.INFO)
    ),
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    logger.info(
        "app_starting",
        environment=settings.environment,
        storage_backend=settings.storage_backend,
        cache_enabled=bool(settings.redis_url),
    )
    yield
    logger.info("app_shutting_down")


app = FastAPI(
    title="Marketing Site",
    description="Landing page with projects, testimonials, contact form and newsletter, plus admin panel",
    version="0.1.0",
    lifespan=lifespan,
)

# Mount static files
_admin_static = pathlib.Path(__file__).parent / "admin" / "static"
app.mount("/admin/static", StaticFiles(directory=str(_admin_static)), name="admin-static")
_landing_static = pathlib.Path(__file__).parent / "landing" / "static"
app.mount("/static", StaticFiles(directory=str(_landing_static)), name="static")

# Locally stored uploads are served under /media
if settings.storage_backend == "local":
    _media_root = pathlib.Path(settings.media_root)
    _media_root.mkdir(parents=True, exist_ok=True)
    app.mount("/media", StaticFiles(directory=str(_media_root)), name="media")

# Include routers
app.include_router(landing_router)
app.include_router(records_router)
app.include_router(admin_panel_router)
app.include_router(admin_projects_router)
app.include_router(admin_clients_router)
app.include_router(admin_contacts_router)
app.include_router(admin_subscribers_router)
