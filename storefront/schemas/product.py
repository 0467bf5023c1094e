"""
Product API schemas for request/response validation.
These models define the structure of data sent to and from the API.
"""
from typing import List, Optional, Union
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .catalog import BrandResponse, CategoryResponse
from .common import check_object_id

MAX_IMAGES = 10


# Request Schemas

class CreateProductRequest(BaseModel):
    """Request schema for creating a new product."""
    title: str = Field(..., min_length=1, max_length=200, description="Product title")
    description: str = Field(..., min_length=1, max_length=2000, description="Product description")
    price: float = Field(..., gt=0, description="Product price (must be positive)")
    discount_percentage: float = Field(0, ge=0, le=100, description="Discount percentage")
    category: str = Field(..., description="Category ID")
    brand: str = Field(..., description="Brand ID")
    stock_quantity: int = Field(..., ge=0, description="Available stock quantity")
    thumbnail: str = Field(..., min_length=1, description="Thumbnail image URL")
    images: List[str] = Field(default=[], description="List of image URLs")

    @field_validator('category')
    @classmethod
    def validate_category(cls, v):
        return check_object_id(v, "category")

    @field_validator('brand')
    @classmethod
    def validate_brand(cls, v):
        return check_object_id(v, "brand")

    @field_validator('images')
    @classmethod
    def validate_images(cls, v):
        if len(v) > MAX_IMAGES:
            raise ValueError(f'Maximum {MAX_IMAGES} images allowed')
        return v


class UpdateProductRequest(BaseModel):
    """Request schema for updating a product."""
    title: Optional[str] = Field(None, min_length=1, max_length=200, description="Product title")
    description: Optional[str] = Field(None, min_length=1, max_length=2000, description="Product description")
    price: Optional[float] = Field(None, gt=0, description="Product price")
    discount_percentage: Optional[float] = Field(None, ge=0, le=100, description="Discount percentage")
    category: Optional[str] = Field(None, description="Category ID")
    brand: Optional[str] = Field(None, description="Brand ID")
    stock_quantity: Optional[int] = Field(None, ge=0, description="Stock quantity")
    thumbnail: Optional[str] = Field(None, min_length=1, description="Thumbnail image URL")
    images: Optional[List[str]] = Field(None, description="Product image URLs")

    @field_validator('category')
    @classmethod
    def validate_category(cls, v):
        return check_object_id(v, "category")

    @field_validator('brand')
    @classmethod
    def validate_brand(cls, v):
        return check_object_id(v, "brand")

    @field_validator('images')
    @classmethod
    def validate_images(cls, v):
        if v is not None and len(v) > MAX_IMAGES:
            raise ValueError(f'Maximum {MAX_IMAGES} images allowed')
        return v


# Response Schemas

class ProductResponse(BaseModel):
    """Response schema for a single product, with references possibly populated."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", description="Product ID")
    title: str = Field(..., description="Product title")
    description: str = Field(..., description="Product description")
    price: float = Field(..., description="Product price")
    discount_percentage: float = Field(0, description="Discount percentage")
    category: Optional[Union[CategoryResponse, str]] = Field(None, description="Category, or its ID")
    brand: Optional[Union[BrandResponse, str]] = Field(None, description="Brand, or its ID")
    stock_quantity: int = Field(..., description="Available stock")
    thumbnail: str = Field(..., description="Thumbnail image URL")
    images: List[str] = Field(default=[], description="Product image URLs")
    is_deleted: bool = Field(False, description="Whether the product was soft-deleted")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")
