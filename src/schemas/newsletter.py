"""Newsletter subscription schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, field_validator


class SubscriberCreate(BaseModel):
    email: EmailStr

    @field_validator("email", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("email")
    @classmethod
    def _lowercase(cls, value: str) -> str:
        # Uniqueness is case-insensitive
        return value.lower()


class SubscriberResponse(BaseModel):
    id: UUID
    email: str
    created_at: datetime

    model_config = {"from_attributes": True}
