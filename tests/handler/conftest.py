"""Gateway handler fixtures — file-backed SQLite shared by every per-branch engine.

Invariants:
    - DATABASE_URL points at a fresh file under tmp_path with the table provisioned
    - get_settings cache cleared before and after, so the handler sees the test URL
"""

import asyncio
import json

import pytest
from sqlalchemy.ext.asyncio import create_async_engine

from formapp.config import get_settings
from formapp.db.base import provision_schema


@pytest.fixture
def database_url(tmp_path, monkeypatch):
    url = f"sqlite+aiosqlite:///{tmp_path / 'handler.db'}"

    async def _provision():
        engine = create_async_engine(url)
        await provision_schema(engine)
        await engine.dispose()

    asyncio.run(_provision())
    monkeypatch.setenv("DATABASE_URL", url)
    get_settings.cache_clear()
    yield url
    get_settings.cache_clear()


@pytest.fixture
def make_event():
    """Build a REST-API (v1) proxy event."""
    def _make(method, path, body=None, path_id=None, **extra):
        event = {
            "httpMethod": method,
            "path": path,
            "pathParameters": {"id": path_id} if path_id else None,
            "body": json.dumps(body) if isinstance(body, (dict, list)) else body,
        }
        event.update(extra)
        return event
    return _make
