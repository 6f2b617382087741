"""Contact form schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator
from pydantic_core import PydanticCustomError

EMAIL_MAX_LENGTH = 255


class ContactCreate(BaseModel):
    """Data submitted from the landing page contact form."""

    full_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    mobile: str = Field(..., min_length=1, max_length=20)
    city: str = Field(..., min_length=1, max_length=100)

    model_config = {"str_strip_whitespace": True}

    @field_validator("email", mode="before")
    @classmethod
    def _check_email_length(cls, value):
        if isinstance(value, str):
            value = value.strip()
            if len(value) > EMAIL_MAX_LENGTH:
                raise PydanticCustomError(
                    "string_too_long",
                    "String should have at most {max_length} characters",
                    {"max_length": EMAIL_MAX_LENGTH},
                )
        return value


class ContactResponse(BaseModel):
    id: UUID
    full_name: str
    email: str
    mobile: str
    city: str
    created_at: datetime

    model_config = {"from_attributes": True}
