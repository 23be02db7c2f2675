"""Server test fixtures — async SQLite database + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database with the submissions table
    - app.state.db_manager is replaced by a manager bound to the test engine
    - broken_client points at a database without the table (storage failures)
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from formapp.db.base import Base, provision_schema
from formapp.infrastructure.database import DatabaseSessionManager
from formapp.main import app


def _manager_for(engine) -> DatabaseSessionManager:
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = engine
    manager._session_factory = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False,
    )
    return manager


@pytest.fixture
async def test_engine():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    await provision_schema(engine)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_db(test_engine):
    factory = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )
    async with factory() as session:
        yield session


@pytest.fixture
def db_manager(test_engine):
    return _manager_for(test_engine)


@pytest.fixture
async def client(db_manager):
    original = getattr(app.state, "db_manager", None)
    app.state.db_manager = db_manager
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
    app.state.db_manager = original


@pytest.fixture
async def broken_client():
    """Client whose database has no submissions table."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    original = getattr(app.state, "db_manager", None)
    app.state.db_manager = _manager_for(engine)
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
    app.state.db_manager = original
    await engine.dispose()
