import os
from typing import AsyncGenerator

os.environ.setdefault("DATABASE_URI", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JSON_LOGS", "false")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from catalog.db.session import create_all, create_engine_for, create_session_factory  # noqa: E402
from catalog.schemas.categories import CategoryCreate  # noqa: E402
from catalog.schemas.items import ItemCreate  # noqa: E402
from catalog.services.categories import CategoryService  # noqa: E402
from catalog.services.items import ItemService  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    test_engine = create_engine_for(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_all(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = create_session_factory(engine)
    async with session_factory() as session:
        yield session


@pytest.fixture
def category_service(db_session: AsyncSession) -> CategoryService:
    return CategoryService(db_session)


@pytest.fixture
def item_service(db_session: AsyncSession) -> ItemService:
    return ItemService(db_session)


@pytest_asyncio.fixture
async def electronics(category_service: CategoryService):
    return await category_service.create_category(CategoryCreate(category_code="ELEC", category_name="Electronics"))


@pytest_asyncio.fixture
async def cable(item_service: ItemService, electronics):
    return await item_service.create_item(
        ItemCreate(
            stock_keeping_unit="SKU-001",
            item_name="Cable",
            item_price="9.99",
            item_stock=100,
            category_id=electronics.category_id,
        )
    )
