import pytest
from sqlalchemy import inspect, text
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.db import session


def test_database_url_comes_from_settings():
    assert session.DATABASE_URL.startswith("sqlite+aiosqlite")
    assert session.engine.url.drivername == "sqlite+aiosqlite"


async def test_sqlite_engine_enforces_foreign_keys(engine):
    async with engine.connect() as conn:
        result = await conn.execute(text("PRAGMA foreign_keys"))
        assert result.scalar() == 1


async def test_create_all_builds_both_tables(engine):
    async with engine.connect() as conn:
        tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
    assert {"category", "item"} <= set(tables)


@pytest.mark.asyncio
async def test_get_db_yields_session():
    async_gen = session.get_db()
    session_obj = await async_gen.__anext__()

    assert isinstance(session_obj, AsyncSession)
    # Clean up generator
    try:
        await async_gen.__anext__()
    except StopAsyncIteration:
        pass


async def test_get_db_rolls_back_on_error():
    async_gen = session.get_db()
    session_obj = await async_gen.__anext__()

    with pytest.raises(RuntimeError):
        await async_gen.athrow(RuntimeError("boom"))

    assert not session_obj.in_transaction()
