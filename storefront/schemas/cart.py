"""
Cart and wishlist API schemas.
"""
from typing import Optional, Union
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..config.settings import get_settings
from .common import check_object_id
from .product import ProductResponse

settings = get_settings()


class AddToCartRequest(BaseModel):
    """Request schema for adding a product to the caller's cart."""
    product: str = Field(..., description="Product ID")
    quantity: int = Field(1, gt=0, le=settings.max_item_quantity, description="Quantity")

    @field_validator('product')
    @classmethod
    def validate_product_id(cls, v):
        return check_object_id(v, "product")


class UpdateCartItemRequest(BaseModel):
    """Request schema for changing the quantity of a cart line."""
    quantity: int = Field(..., gt=0, le=settings.max_item_quantity, description="Quantity")


class CartItemResponse(BaseModel):
    """Response schema for a cart line with its product populated."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", description="Cart line ID")
    user: str = Field(..., description="Owner ID")
    product: Optional[Union[ProductResponse, str]] = Field(None, description="Product, or its ID")
    quantity: int = Field(..., description="Quantity")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")


class AddToWishlistRequest(BaseModel):
    """Request schema for adding a product to the caller's wishlist."""
    product: str = Field(..., description="Product ID")
    note: Optional[str] = Field(None, max_length=500, description="Free-form note")

    @field_validator('product')
    @classmethod
    def validate_product_id(cls, v):
        return check_object_id(v, "product")


class UpdateWishlistItemRequest(BaseModel):
    """Request schema for changing the note of a wishlist line."""
    note: Optional[str] = Field(None, max_length=500, description="Free-form note")


class WishlistItemResponse(BaseModel):
    """Response schema for a wishlist line with its product populated."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", description="Wishlist line ID")
    user: str = Field(..., description="Owner ID")
    product: Optional[Union[ProductResponse, str]] = Field(None, description="Product, or its ID")
    note: Optional[str] = Field(None, description="Free-form note")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
