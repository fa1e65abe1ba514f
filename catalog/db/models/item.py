"""
Database model for items.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from sqlalchemy import Column, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship, validates

from catalog.db.models.base import Clock, TimestampMixin
from catalog.db.models.category import Category
from catalog.db.session import Base

PRICE_PRECISION = 10
PRICE_SCALE = 2


def to_price(value: Union[Decimal, str, int, None]) -> Optional[Decimal]:
    """
    Coerce ``value`` to an exact ``Decimal``.

    Floats are refused outright; ``Decimal(0.1)`` would carry the binary
    rounding error into the catalog.
    """
    if value is None or isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        raise TypeError("item_price must be a Decimal, str or int, not float")
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise TypeError(f"item_price must be a Decimal, str or int, not {type(value).__name__}")
    try:
        return Decimal(value)
    except InvalidOperation as e:
        raise ValueError(f"invalid item_price {value!r}") from e


class Item(TimestampMixin, Base):
    """
    A sellable, stockable unit belonging to exactly one category.
    """

    __tablename__ = "item"

    item_id = Column(Integer, primary_key=True, autoincrement=True)
    stock_keeping_unit = Column(String(64), nullable=False, unique=True)
    item_name = Column(String(128), nullable=False)
    item_price = Column(Numeric(PRICE_PRECISION, PRICE_SCALE, asdecimal=True), nullable=False)
    item_stock = Column(Integer, nullable=False)

    # Foreign keys
    category_id = Column(Integer, ForeignKey("category.category_id"), nullable=False)

    # Relationships
    parent_category = relationship(
        "Category",
        back_populates="associated_items",
        lazy="raise",
        cascade="merge",
    )

    @validates("item_price")
    def validate_item_price(self, key, value):
        return to_price(value)

    @classmethod
    def create(
        cls,
        stock_keeping_unit: str,
        item_name: str,
        item_price: Union[Decimal, str, int],
        item_stock: int,
        parent_category: Optional[Category] = None,
        *,
        category_id: Optional[int] = None,
        clock: Optional[Clock] = None,
    ) -> "Item":
        item = cls(
            stock_keeping_unit=stock_keeping_unit,
            item_name=item_name,
            item_price=item_price,
            item_stock=item_stock,
            clock=clock,
        )
        if parent_category is not None:
            item.parent_category = parent_category
            if category_id is None:
                category_id = parent_category.category_id
        if category_id is not None:
            item.category_id = category_id
        return item

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Item):
            return NotImplemented
        return (self.item_id, self.stock_keeping_unit) == (other.item_id, other.stock_keeping_unit)

    def __hash__(self) -> int:
        return hash((self.item_id, self.stock_keeping_unit))

    def __repr__(self) -> str:
        return f"Item(item_id={self.item_id!r}, stock_keeping_unit={self.stock_keeping_unit!r})"
