"""SQLAlchemy Declarative Base — shared base class for all ORM models."""

from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all formapp ORM models."""
    pass


async def provision_schema(engine: AsyncEngine) -> None:
    """Create missing tables (test fixtures and local bootstrapping only)."""
    import formapp.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
