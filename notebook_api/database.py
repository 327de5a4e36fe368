"""
Notebook API - Store Handle and Session Management
==================================================

What:  The `Database` handle (async SQLAlchemy engine + session factory) and
       the FastAPI dependency that hands each request its own session.
How:   The application factory constructs one `Database`, calls `init()` in
       the lifespan startup and `teardown()` at shutdown, and stores it on
       `app.state.database`. Handlers receive sessions through
       `Depends(get_db_session)`; nothing here is process-global.
Who:   main.py (lifecycle), routes (sessions), tests (SQLite-bound instance).

Connection Pooling (non-SQLite URLs):
    pool_size / max_overflow come from settings.
    pool_pre_ping validates connections before use.
    pool_recycle=3600 recycles connections every hour.
"""

import logging
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from notebook_api.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models; its metadata feeds Alembic."""
    pass


class Database:
    """
    Long-lived handle to the notebook store.

    Safe for concurrent use: the engine owns the connection pool and every
    request opens its own `AsyncSession`.

    Lifecycle:
        db = Database.from_settings(settings)
        await db.init()        # at process start
        ...
        await db.teardown()    # at shutdown
    """

    def __init__(self, url: str, echo: bool = False, **engine_kwargs):
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, echo=echo, **engine_kwargs)
        # expire_on_commit=False keeps loaded rows readable after commit
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        kwargs = {}
        if not settings.is_sqlite:
            kwargs.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=settings.db_pool_pre_ping,
                pool_recycle=3600,
            )
        return cls(settings.database_url, echo=settings.log_level == "DEBUG", **kwargs)

    async def init(self, create_tables: bool = False) -> None:
        """
        Prepare the store for use at process start.

        With create_tables=True the notebooks table is created if missing;
        otherwise the schema is expected to come from `alembic upgrade head`.
        """
        if create_tables:
            # Registers the Notebook model with Base.metadata
            from notebook_api.models import notebook  # noqa: F401

            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            logger.info("Notebook tables ensured")

    async def ping(self) -> None:
        """Runs SELECT 1; raises whatever the driver raises when unreachable."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def teardown(self) -> None:
        """Closes every pooled connection."""
        await self.engine.dispose()


def get_database(request: Request) -> Database:
    """Returns the store handle the application factory attached to the app."""
    database: Optional[Database] = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Database handle is not initialized on app.state")
    return database


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a session per request.

    Commits when the handler returns normally and rolls back on any
    exception, then closes the session so the connection goes back to the
    pool. One request is therefore one transaction.

    Example usage in a route:
        @router.get("/notebooks")
        async def list_notebooks(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    async with get_database(request).session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
