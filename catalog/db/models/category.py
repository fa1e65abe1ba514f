"""
Database model for categories.
"""

from typing import Optional

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from catalog.db.models.base import Clock, TimestampMixin
from catalog.db.session import Base


class Category(TimestampMixin, Base):
    """
    A classification bucket for items.

    Equality and hashing use ``(category_id, category_code)``, so two
    unsaved categories with the same code compare equal.
    """

    __tablename__ = "category"

    category_id = Column(Integer, primary_key=True, autoincrement=True)
    category_code = Column(String(32), nullable=False, unique=True)
    category_name = Column(String(128), nullable=False)

    # Back-reference only. Never loaded implicitly; use
    # CategoryService.get_associated_items() to fetch it.
    associated_items = relationship(
        "Item",
        back_populates="parent_category",
        lazy="raise",
        cascade="merge",
        passive_deletes="all",
        order_by="Item.item_id",
    )

    @classmethod
    def create(cls, category_code: str, category_name: str, *, clock: Optional[Clock] = None) -> "Category":
        return cls(category_code=category_code, category_name=category_name, clock=clock)

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Category):
            return NotImplemented
        return (self.category_id, self.category_code) == (other.category_id, other.category_code)

    def __hash__(self) -> int:
        return hash((self.category_id, self.category_code))

    def __repr__(self) -> str:
        return f"Category(category_id={self.category_id!r}, category_code={self.category_code!r})"
