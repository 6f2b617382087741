"""Shared Jinja2 environment for admin pages."""

import pathlib
from datetime import datetime

from fastapi.templating import Jinja2Templates

TEMPLATES_DIR = pathlib.Path(__file__).parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def short_date(value: datetime) -> str:
    """Format like "Mar 5, 2025"."""
    if value is None:
        return ""
    return f"{value:%b} {value.day}, {value:%Y}"


templates.env.filters["short_date"] = short_date
