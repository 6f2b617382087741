"""Project schemas for forms and API."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    image_url: Optional[str] = None

    model_config = {"str_strip_whitespace": True}


class ProjectResponse(BaseModel):
    id: UUID
    name: str
    description: str
    image_url: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}
