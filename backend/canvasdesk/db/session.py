"""Schema bootstrap — creates tables directly from ORM metadata.

Invariants:
    - Meant for local SQLite databases and test fixtures; Postgres uses alembic

Design Decisions:
    - Separate from infrastructure/database.py: usable without a DatabaseSessionManager
      (ADR: test fixtures own their engine)
"""

from sqlalchemy.ext.asyncio import AsyncEngine

from canvasdesk.db.base import Base


async def create_all(engine: AsyncEngine) -> None:
    """Create every table registered on Base."""
    import canvasdesk.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_all(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
