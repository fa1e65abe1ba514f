from datetime import datetime, timezone

import pytest

from catalog.core.exceptions import NotFoundError, ReferentialIntegrityViolation, UniquenessViolation
from catalog.db.models import Category
from catalog.schemas.categories import CategoryCreate, CategoryUpdate

LATER = datetime(2031, 5, 4, 3, 2, 1, tzinfo=timezone.utc)


def naive(value: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


async def test_create_category(category_service, electronics):
    assert isinstance(electronics, Category)
    assert electronics.category_id is not None
    assert electronics.category_code == "ELEC"
    assert electronics.last_updated is not None

    fetched = await category_service.get_category(electronics.category_id)
    assert fetched == electronics


async def test_get_category_by_code(category_service, electronics):
    assert await category_service.get_category_by_code("ELEC") == electronics
    assert await category_service.get_category_by_code("NOPE") is None


async def test_duplicate_code_rejected(category_service, electronics):
    with pytest.raises(UniquenessViolation) as exc:
        await category_service.create_category(CategoryCreate(category_code="ELEC", category_name="Other"))

    assert exc.value.field == "category_code"
    assert exc.value.entity == "category"
    assert len(await category_service.list_categories()) == 1


async def test_duplicate_code_caught_at_commit(category_service, electronics, monkeypatch):
    async def skip_precheck(entity, exclude_id=None):
        return None

    monkeypatch.setattr(category_service, "_check_unique", skip_precheck)

    with pytest.raises(UniquenessViolation):
        await category_service.create_category(CategoryCreate(category_code="ELEC", category_name="Other"))

    assert [c.category_code for c in await category_service.list_categories()] == ["ELEC"]


async def test_list_categories_paginates(category_service):
    for code in ("A", "B", "C"):
        await category_service.create_category(CategoryCreate(category_code=code, category_name=code))

    page = await category_service.list_categories(skip=1, limit=1)
    assert [c.category_code for c in page] == ["B"]


async def test_update_category_refreshes_last_updated(category_service, electronics, monkeypatch):
    monkeypatch.setattr("catalog.db.models.base.utcnow", lambda: LATER)

    updated = await category_service.update_category(
        electronics.category_id, CategoryUpdate(category_name="Consumer Electronics")
    )

    assert updated.category_name == "Consumer Electronics"
    assert updated.category_code == "ELEC"
    assert naive(updated.last_updated) == naive(LATER)


async def test_update_category_to_taken_code(category_service, electronics):
    home = await category_service.create_category(CategoryCreate(category_code="HOME", category_name="Home"))

    with pytest.raises(UniquenessViolation):
        await category_service.update_category(home.category_id, CategoryUpdate(category_code="ELEC"))


async def test_update_category_keeps_own_code(category_service, electronics):
    updated = await category_service.update_category(electronics.category_id, CategoryUpdate(category_code="ELEC"))
    assert updated.category_code == "ELEC"


async def test_update_missing_category(category_service):
    with pytest.raises(NotFoundError):
        await category_service.update_category(999, CategoryUpdate(category_name="x"))


async def test_delete_category(category_service, electronics):
    await category_service.delete_category(electronics.category_id)
    assert await category_service.get_category(electronics.category_id) is None


async def test_delete_category_with_items_is_refused(category_service, item_service, electronics, cable):
    with pytest.raises(ReferentialIntegrityViolation):
        await category_service.delete_category(electronics.category_id)

    assert await category_service.get_category(electronics.category_id) is not None
    assert await item_service.get_item(cable.item_id) is not None


async def test_delete_category_after_items_removed(category_service, item_service, electronics, cable):
    await item_service.delete_item(cable.item_id)
    await category_service.delete_category(electronics.category_id)

    assert await category_service.get_category(electronics.category_id) is None


async def test_delete_missing_category(category_service):
    with pytest.raises(NotFoundError):
        await category_service.delete_category(42)


async def test_associated_items_lookup(category_service, electronics, cable):
    items = await category_service.get_associated_items(electronics.category_id)
    assert items == [cable]


async def test_associated_items_unknown_category(category_service):
    assert await category_service.get_associated_items(999) == []


async def test_rejected_update_does_not_leak_into_next_write(category_service, electronics):
    home = await category_service.create_category(CategoryCreate(category_code="HOME", category_name="Home"))

    with pytest.raises(UniquenessViolation):
        await category_service.update_category(home.category_id, CategoryUpdate(category_code="ELEC"))

    assert home.category_code == "HOME"

    toys = await category_service.create_category(CategoryCreate(category_code="TOYS", category_name="Toys"))
    assert toys.category_id is not None

    stored = await category_service.get_category(home.category_id)
    assert stored.category_code == "HOME"
