"""
Review API schemas.
"""
from typing import Optional, Union
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import check_object_id
from .user import PublicUserResponse


class CreateReviewRequest(BaseModel):
    """Request schema for reviewing a product."""
    product: str = Field(..., description="Product ID")
    rating: int = Field(..., ge=1, le=5, description="Rating from 1 to 5")
    comment: str = Field(..., min_length=1, max_length=2000, description="Review text")

    @field_validator('product')
    @classmethod
    def validate_product_id(cls, v):
        return check_object_id(v, "product")


class UpdateReviewRequest(BaseModel):
    """Request schema for editing a review."""
    rating: Optional[int] = Field(None, ge=1, le=5, description="Rating from 1 to 5")
    comment: Optional[str] = Field(None, min_length=1, max_length=2000, description="Review text")


class ReviewResponse(BaseModel):
    """Response schema for a review with its author populated."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", description="Review ID")
    user: Optional[Union[PublicUserResponse, str]] = Field(None, description="Author, or their ID")
    product: str = Field(..., description="Product ID")
    rating: int = Field(..., description="Rating from 1 to 5")
    comment: str = Field(..., description="Review text")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")
