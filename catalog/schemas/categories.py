"""
Pydantic schemas for the categories resource.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class CategoryBase(BaseModel):
    """
    Base schema for category data.
    """

    category_code: str = Field(..., min_length=1, max_length=32, description="Unique category code")
    category_name: str = Field(..., min_length=1, max_length=128, description="Category name")

    @field_validator("category_code", "category_name")
    @classmethod
    def reject_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class CategoryCreate(CategoryBase):
    """
    Schema for creating a new category.
    """

    pass


class CategoryUpdate(BaseModel):
    """
    Schema for updating an existing category.
    """

    category_code: Optional[str] = Field(None, min_length=1, max_length=32, description="Unique category code")
    category_name: Optional[str] = Field(None, min_length=1, max_length=128, description="Category name")

    @field_validator("category_code", "category_name")
    @classmethod
    def reject_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("must not be blank")
        return v


class CategoryResponse(CategoryBase):
    """
    Schema for category response.
    """

    category_id: int = Field(..., description="Category ID")
    last_updated: datetime = Field(..., description="Last update timestamp")

    model_config = {
        "from_attributes": True,
        "json_schema_extra": {
            "examples": [
                {
                    "category_id": 1,
                    "category_code": "ELEC",
                    "category_name": "Electronics",
                    "last_updated": "2024-01-01T00:00:00Z",
                }
            ]
        },
    }
