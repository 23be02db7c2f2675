"""Database Session Manager — async engine ownership, automatic rollback, health checks.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - Every SQLAlchemy / connection exception is mapped to DatabaseError (core/errors.py)
      with the driver message passed through
    - The server owns exactly one manager, created in the lifespan and kept on app.state
    - The gateway handler builds a NullPool manager per branch and disposes it
      before returning (per_invocation)

Design Decisions:
    - expire_on_commit=False: created rows stay readable after commit without a refresh
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)
from sqlalchemy.pool import NullPool

from formapp.config import Settings
from formapp.core.errors import DatabaseError

logger = logging.getLogger(__name__)


def _driver_message(exc: Exception) -> str:
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


def _connect_args(database_url: str, connect_timeout: int | None) -> dict:
    if connect_timeout and database_url.startswith("postgresql+asyncpg"):
        return {"timeout": connect_timeout}
    return {}


class DatabaseSessionManager:
    """Owns an async engine; hands out sessions with rollback and error mapping."""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 5,
        max_overflow: int = 5,
        *,
        pooled: bool = True,
        connect_timeout: int | None = None,
    ):
        engine_kwargs = {
            "connect_args": _connect_args(database_url, connect_timeout),
        }
        if pooled:
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_pre_ping=True,
                pool_recycle=3600,
            )
        else:
            engine_kwargs["poolclass"] = NullPool
        self.engine = create_async_engine(database_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "DatabaseSessionManager":
        """Pooled manager for the long-running server."""
        return cls(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            logger.error(f"DB integrity error: {e}")
            raise DatabaseError(_driver_message(e), "commit") from e
        except OperationalError as e:
            await session.rollback()
            logger.error(f"DB operational error: {e}")
            raise DatabaseError(_driver_message(e), "execute") from e
        except DBAPIError as e:
            await session.rollback()
            logger.error(f"DB driver error: {e}")
            raise DatabaseError(_driver_message(e), "query") from e
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}")
            raise DatabaseError(_driver_message(e), "operation") from e
        except (OSError, asyncio.TimeoutError) as e:
            logger.error(f"DB connection error: {e!r}")
            raise DatabaseError(str(e) or type(e).__name__, "connection") from e
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Round-trip SELECT 1 (readiness probe). Never raises."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


@asynccontextmanager
async def per_invocation(
    settings: Settings,
) -> AsyncGenerator[DatabaseSessionManager, None]:
    """Unpooled manager that lives for one gateway branch, then is torn down."""
    manager = DatabaseSessionManager(
        settings.database_url,
        pooled=False,
        connect_timeout=settings.database_connect_timeout,
    )
    try:
        yield manager
    finally:
        await manager.dispose()


def get_db_manager(request: Request) -> DatabaseSessionManager:
    """FastAPI dependency — the manager created by the app lifespan."""
    manager = getattr(request.app.state, "db_manager", None)
    if manager is None:
        raise RuntimeError("Database not initialized")
    return manager
