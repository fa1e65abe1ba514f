"""Business logic for items."""

from typing import List, Optional

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from catalog.core.exceptions import NotFoundError, ReferentialIntegrityViolation
from catalog.db.models.category import Category
from catalog.db.models.item import Item
from catalog.schemas.items import ItemCreate, ItemUpdate
from catalog.services.base import BaseService


class ItemService(BaseService):
    """Service for item-related operations."""

    model = Item

    async def list_items(
        self,
        skip: int = 0,
        limit: int = 100,
        name: Optional[str] = None,
    ) -> List[Item]:
        """Get a list of items with optional filtering."""
        query = select(Item).order_by(Item.item_id).offset(skip).limit(limit)

        if name:
            query = query.where(Item.item_name.ilike(f"%{name}%"))

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def list_items_by_category(self, category_id: int) -> List[Item]:
        query = select(Item).where(Item.category_id == category_id).order_by(Item.item_id)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_item(self, item_id: int) -> Optional[Item]:
        """Get a specific item by ID, with its parent category loaded."""
        query = select(Item).options(selectinload(Item.parent_category)).where(Item.item_id == item_id)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_item_by_sku(self, stock_keeping_unit: str) -> Optional[Item]:
        query = (
            select(Item)
            .options(selectinload(Item.parent_category))
            .where(Item.stock_keeping_unit == stock_keeping_unit)
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def _require(self, item_id: int) -> Item:
        item = await self.get_item(item_id)
        if item is None:
            logger.error(f"Item with ID {item_id} not found")
            raise NotFoundError(f"Item with ID {item_id} not found", entity=self.entity_name)
        return item

    async def _require_category(self, category_id: int) -> Category:
        result = await self.db.execute(select(Category).where(Category.category_id == category_id))
        category = result.scalar_one_or_none()
        if category is None:
            logger.bind(entity=self.entity_name, field="category_id").warning(
                f"Item references missing category {category_id}"
            )
            raise ReferentialIntegrityViolation(
                f"Category with ID {category_id} does not exist",
                entity=self.entity_name,
                field="category_id",
            )
        return category

    async def create_item(self, item_data: ItemCreate) -> Item:
        """Create a new item under an existing category."""
        item = Item(**item_data.model_dump())
        self._validate(item)
        item.parent_category = await self._require_category(item.category_id)
        await self._check_unique(item)

        self.db.add(item)
        await self._commit()

        logger.info(f"Created new item with ID {item.item_id}")
        return item

    async def update_item(self, item_id: int, item_data: ItemUpdate) -> Item:
        """Update an existing item. Only fields set on ``item_data`` change."""
        item = await self._require(item_id)

        item_data_dict = item_data.model_dump(exclude_unset=True)
        category = None
        if item_data_dict.get("category_id") is not None:
            category = await self._require_category(item_data_dict["category_id"])
        for key, value in item_data_dict.items():
            setattr(item, key, value)

        await self._check_changes(item, exclude_id=item_id)
        # attached only once accepted; the backref marks the new category dirty
        if category is not None:
            item.parent_category = category

        await self._commit()

        logger.info(f"Updated item with ID {item.item_id}")
        return item

    async def delete_item(self, item_id: int) -> None:
        """Delete an item. Its category is left untouched."""
        item = await self._require(item_id)

        await self.db.delete(item)
        await self._commit()

        logger.info(f"Deleted item with ID {item_id}")
