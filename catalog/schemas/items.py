"""
Pydantic schemas for the items resource.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


def _reject_float(v: Any) -> Any:
    if isinstance(v, float):
        raise ValueError("price must be given as a string, integer or Decimal, not a float")
    return v


class ItemBase(BaseModel):
    """
    Base schema for item data.
    """

    stock_keeping_unit: str = Field(..., min_length=1, max_length=64, description="Unique stock-keeping unit")
    item_name: str = Field(..., min_length=1, max_length=128, description="Item name")
    item_price: Decimal = Field(..., max_digits=10, decimal_places=2, description="Item price")
    item_stock: int = Field(..., description="Quantity on hand")
    category_id: int = Field(..., description="Owning category ID")

    @field_validator("item_price", mode="before")
    @classmethod
    def validate_price_type(cls, v: Any) -> Any:
        return _reject_float(v)


class ItemCreate(ItemBase):
    """
    Schema for creating a new item.
    """

    pass


class ItemUpdate(BaseModel):
    """
    Schema for updating an existing item.
    """

    stock_keeping_unit: Optional[str] = Field(None, min_length=1, max_length=64, description="Unique stock-keeping unit")
    item_name: Optional[str] = Field(None, min_length=1, max_length=128, description="Item name")
    item_price: Optional[Decimal] = Field(None, max_digits=10, decimal_places=2, description="Item price")
    item_stock: Optional[int] = Field(None, description="Quantity on hand")
    category_id: Optional[int] = Field(None, description="Owning category ID")

    @field_validator("item_price", mode="before")
    @classmethod
    def validate_price_type(cls, v: Any) -> Any:
        return _reject_float(v)


class ItemResponse(ItemBase):
    """
    Schema for item response.
    """

    item_id: int = Field(..., description="Item ID")
    last_updated: datetime = Field(..., description="Last update timestamp")

    model_config = {
        "from_attributes": True,
        "json_schema_extra": {
            "examples": [
                {
                    "item_id": 1,
                    "stock_keeping_unit": "SKU-001",
                    "item_name": "Cable",
                    "item_price": "9.99",
                    "item_stock": 100,
                    "category_id": 1,
                    "last_updated": "2024-01-01T00:00:00Z",
                }
            ]
        },
    }
