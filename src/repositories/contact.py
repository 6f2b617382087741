"""Contact submissions repository."""

from src.models.contact import Contact
from src.repositories.base import RecordRepository


class ContactRepository(RecordRepository[Contact]):
    model = Contact
