"""Client repository."""

from src.models.client import Client
from src.repositories.base import RecordRepository


class ClientRepository(RecordRepository[Client]):
    model = Client
