"""
Brand and category API schemas.
"""
from pydantic import BaseModel, ConfigDict, Field


class CreateBrandRequest(BaseModel):
    """Request schema for creating a brand."""
    name: str = Field(..., min_length=1, max_length=100, description="Brand name")


class CreateCategoryRequest(BaseModel):
    """Request schema for creating a category."""
    name: str = Field(..., min_length=1, max_length=100, description="Category name")


class BrandResponse(BaseModel):
    """Response schema for a brand."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", description="Brand ID")
    name: str = Field(..., description="Brand name")


class CategoryResponse(BaseModel):
    """Response schema for a category."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", description="Category ID")
    name: str = Field(..., description="Category name")
