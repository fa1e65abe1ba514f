"""
Database session configuration.
"""

import os
from typing import Any, AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from catalog.core.config import settings

if "PYTEST_CURRENT_TEST" in os.environ:
    DATABASE_URL = os.getenv("TEST_DATABASE_URL") or str(settings.DATABASE_URI)
else:
    DATABASE_URL = str(settings.DATABASE_URI)

# Base class for all models
Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine_for(url: str, **kwargs: Any) -> AsyncEngine:
    """
    Create an async engine for ``url``.

    SQLite does not enforce foreign keys unless asked to on every connection.
    """
    if url.startswith("sqlite"):
        async_engine = create_async_engine(url, echo=settings.DEBUG, **kwargs)
        if settings.SQLITE_FOREIGN_KEYS:
            event.listen(async_engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return async_engine

    kwargs.setdefault("pool_pre_ping", True)
    kwargs.setdefault("pool_size", 10)
    kwargs.setdefault("max_overflow", 20)
    return create_async_engine(url, echo=settings.DEBUG, **kwargs)


def create_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=bind,
        expire_on_commit=False,
        autoflush=False,
        class_=AsyncSession,
    )


engine = create_engine_for(DATABASE_URL)
async_session_factory = create_session_factory(engine)


async def create_all(bind: AsyncEngine) -> None:
    """Create every mapped table. Bootstrap and tests only; not a migration tool."""
    # models must be imported so their tables are registered on Base.metadata
    import catalog.db.models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Get a database session.

    Commits when the caller finishes cleanly, rolls back otherwise.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
