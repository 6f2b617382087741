"""Create the tables and seed sample projects and testimonials."""

import asyncio

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from src.config import settings
from src.models import Base, Client, Project


PROJECTS = [
    {
        "name": "Consultation",
        "description": "Project strategy and market positioning for a regional retail chain.",
    },
    {
        "name": "Design",
        "description": "Brand identity and website redesign for a boutique architecture studio.",
    },
    {
        "name": "Marketing & Design",
        "description": "Launch campaign and landing pages for a fintech startup.",
    },
]

CLIENTS = [
    {
        "name": "Rowhan Smith",
        "designation": "CEO, Foreclosure",
        "description": "They understood our goals from the first call and delivered ahead of schedule.",
    },
    {
        "name": "Shipra Kayak",
        "designation": "Brand Designer",
        "description": "A thoughtful team that turned a vague idea into a clear, beautiful product.",
    },
    {
        "name": "John Lepore",
        "designation": "CEO, Foreclosure",
        "description": "Our inbound leads doubled within three months of the new site going live.",
    },
]


async def seed():
    """Create tables and insert sample rows into empty tables."""
    engine = create_async_engine(settings.database_url)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession)

    async with session_factory() as session:
        for model, rows in ((Project, PROJECTS), (Client, CLIENTS)):
            count = (await session.execute(select(func.count()).select_from(model))).scalar_one()
            if count:
                print(f"  = {model.__tablename__}: {count} rows, skipped")
                continue
            for row in rows:
                session.add(model(**row))
                print(f"  + {model.__tablename__}: {row['name']}")

        await session.commit()

    await engine.dispose()
    print("\nSeed completed!")


if __name__ == "__main__":
    asyncio.run(seed())
