"""
Order API schemas for request/response validation.
These models define the structure of data sent to and from the API.
"""
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..config.settings import get_settings
from .common import check_object_id

settings = get_settings()

ORDER_STATUSES = ['Pending', 'Dispatched', 'Out for delivery', 'Delivered', 'Cancelled']
PAYMENT_MODES = ['COD', 'UPI', 'CARD']
CANCELLED = 'Cancelled'


# Request Schemas

class OrderItemRequest(BaseModel):
    """Request schema for order items."""
    product: str = Field(..., description="Product ID")
    quantity: int = Field(..., gt=0, le=settings.max_item_quantity, description="Quantity ordered")

    @field_validator('product')
    @classmethod
    def validate_product_id(cls, v):
        return check_object_id(v, "product")


class CreateOrderRequest(BaseModel):
    """Request schema for placing an order."""
    items: List[OrderItemRequest] = Field(
        ..., min_length=1, max_length=settings.max_order_items, description="List of items in the order"
    )
    address: str = Field(..., description="ID of one of the caller's saved addresses")
    payment_mode: str = Field(..., description="Payment mode")

    @field_validator('address')
    @classmethod
    def validate_address_id(cls, v):
        return check_object_id(v, "address")

    @field_validator('payment_mode')
    @classmethod
    def validate_payment_mode(cls, v):
        if v.upper() not in PAYMENT_MODES:
            raise ValueError(f'Invalid payment mode. Must be one of: {PAYMENT_MODES}')
        return v.upper()

    @field_validator('items')
    @classmethod
    def validate_unique_products(cls, v):
        product_ids = [item.product for item in v]
        if len(product_ids) != len(set(product_ids)):
            raise ValueError('Each product may appear only once in an order')
        return v


class UpdateOrderStatusRequest(BaseModel):
    """Request schema for updating order status."""
    status: str = Field(..., description="New order status")

    @field_validator('status')
    @classmethod
    def validate_status(cls, v):
        for status in ORDER_STATUSES:
            if status.lower() == v.lower():
                return status
        raise ValueError(f'Invalid status. Must be one of: {ORDER_STATUSES}')


# Response Schemas

class OrderItemResponse(BaseModel):
    """Snapshot of a product at the time it was ordered."""
    product: str = Field(..., description="Product ID")
    title: str = Field(..., description="Product title")
    thumbnail: Optional[str] = Field(None, description="Product thumbnail")
    price: float = Field(..., description="Price per item at time of order")
    quantity: int = Field(..., description="Quantity ordered")
    total_price: float = Field(..., description="Total price for this item")


class OrderAddressResponse(BaseModel):
    """Snapshot of the delivery address."""
    street: str
    city: str
    state: str
    phone_number: str
    postal_code: str
    country: str
    type: Optional[str] = None


class OrderResponse(BaseModel):
    """Response schema for a single order."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", description="Order ID")
    user: str = Field(..., description="ID of the user who placed the order")
    items: List[OrderItemResponse] = Field(..., description="Order items")
    address: OrderAddressResponse = Field(..., description="Delivery address")
    status: str = Field(..., description="Order status")
    payment_mode: str = Field(..., description="Payment mode")
    total: float = Field(..., description="Total order amount")
    created_at: datetime = Field(..., description="Order creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")
