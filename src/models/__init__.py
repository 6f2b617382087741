"""SQLAlchemy ORM models."""

from src.models.base import Base
from src.models.project import Project
from src.models.client import Client
from src.models.contact import Contact
from src.models.newsletter import NewsletterSubscriber

__all__ = [
    "Base",
    "Project",
    "Client",
    "Contact",
    "NewsletterSubscriber",
]
