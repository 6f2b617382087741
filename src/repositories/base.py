"""Generic insert/list repository shared by all record tables."""

from __future__ import annotations

from typing import Any, Generic, List, Type, TypeVar

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.base import Base

logger = structlog.get_logger()

ModelT = TypeVar("ModelT", bound=Base)


class RecordRepository(Generic[ModelT]):
    """Creates rows and lists them newest first. Rows are never updated."""

    model: Type[ModelT]

    def __init__(self, db: AsyncSession):
        self.db = db

    @property
    def table(self) -> str:
        return self.model.__tablename__

    async def list_recent(self) -> List[ModelT]:
        """All rows ordered by creation time, newest first."""
        stmt = select(self.model).order_by(self.model.created_at.desc())
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def create(self, **values: Any) -> ModelT:
        """Insert one row and flush it so database constraints are checked."""
        row = self.model(**values)
        self.db.add(row)
        await self.db.flush()

        logger.info("record_created", table=self.table, id=str(row.id))
        return row
