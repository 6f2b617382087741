"""Project repository."""

from src.models.project import Project
from src.repositories.base import RecordRepository


class ProjectRepository(RecordRepository[Project]):
    model = Project
