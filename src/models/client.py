"""Client model — testimonials shown on the landing page."""

from typing import Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, TimestampMixin, UUIDMixin


class Client(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "clients"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    designation: Mapped[str] = mapped_column(String(200), nullable=False)
    image_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
