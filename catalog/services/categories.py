"""Business logic for categories."""

from typing import List, Optional

from loguru import logger
from sqlalchemy import func, select

from catalog.core.exceptions import NotFoundError, ReferentialIntegrityViolation
from catalog.db.models.category import Category
from catalog.db.models.item import Item
from catalog.schemas.categories import CategoryCreate, CategoryUpdate
from catalog.services.base import BaseService
from catalog.services.items import ItemService


class CategoryService(BaseService):
    """Service for category-related operations."""

    model = Category

    async def list_categories(self, skip: int = 0, limit: int = 100) -> List[Category]:
        query = select(Category).order_by(Category.category_id).offset(skip).limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_category(self, category_id: int) -> Optional[Category]:
        """Get a specific category by ID."""
        result = await self.db.execute(select(Category).where(Category.category_id == category_id))
        return result.scalar_one_or_none()

    async def get_category_by_code(self, category_code: str) -> Optional[Category]:
        result = await self.db.execute(select(Category).where(Category.category_code == category_code))
        return result.scalar_one_or_none()

    async def _require(self, category_id: int) -> Category:
        category = await self.get_category(category_id)
        if category is None:
            logger.error(f"Category with ID {category_id} not found")
            raise NotFoundError(f"Category with ID {category_id} not found", entity=self.entity_name)
        return category

    async def create_category(self, category_data: CategoryCreate) -> Category:
        """Create a new category."""
        category = Category(**category_data.model_dump())
        self._validate(category)
        await self._check_unique(category)

        self.db.add(category)
        await self._commit()
        await self.db.refresh(category)

        logger.info(f"Created new category with ID {category.category_id}")
        return category

    async def update_category(self, category_id: int, category_data: CategoryUpdate) -> Category:
        """Update an existing category. Only fields set on ``category_data`` change."""
        category = await self._require(category_id)

        for key, value in category_data.model_dump(exclude_unset=True).items():
            setattr(category, key, value)

        await self._check_changes(category, exclude_id=category_id)

        await self._commit()
        await self.db.refresh(category)

        logger.info(f"Updated category with ID {category.category_id}")
        return category

    async def delete_category(self, category_id: int) -> None:
        """
        Delete a category.

        Items are never cascaded; a category that still owns items is kept.
        """
        category = await self._require(category_id)

        result = await self.db.execute(select(func.count(Item.item_id)).where(Item.category_id == category_id))
        item_count = result.scalar_one()
        if item_count:
            logger.warning(f"Category with ID {category_id} still has {item_count} item(s)")
            raise ReferentialIntegrityViolation(
                f"Category with ID {category_id} is referenced by {item_count} item(s)",
                entity=self.entity_name,
                field="category_id",
            )

        await self.db.delete(category)
        await self._commit()

        logger.info(f"Deleted category with ID {category_id}")

    async def get_associated_items(self, category_id: int) -> List[Item]:
        """
        Resolve a category's items on demand, ordered by item ID.

        An unknown category yields an empty list.
        """
        return await ItemService(self.db).list_items_by_category(category_id)
