"""
Address API schemas.
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class CreateAddressRequest(BaseModel):
    """Request schema for saving an address."""
    street: str = Field(..., min_length=1, max_length=200, description="Street address")
    city: str = Field(..., min_length=1, max_length=100, description="City")
    state: str = Field(..., min_length=1, max_length=100, description="State/Province")
    phone_number: str = Field(..., min_length=3, max_length=30, description="Contact phone number")
    postal_code: str = Field(..., min_length=1, max_length=20, description="Postal/ZIP code")
    country: str = Field(..., min_length=1, max_length=100, description="Country")
    type: str = Field("Home", min_length=1, max_length=50, description="Label such as Home or Work")


class UpdateAddressRequest(BaseModel):
    """Request schema for updating an address."""
    street: Optional[str] = Field(None, min_length=1, max_length=200)
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    state: Optional[str] = Field(None, min_length=1, max_length=100)
    phone_number: Optional[str] = Field(None, min_length=3, max_length=30)
    postal_code: Optional[str] = Field(None, min_length=1, max_length=20)
    country: Optional[str] = Field(None, min_length=1, max_length=100)
    type: Optional[str] = Field(None, min_length=1, max_length=50)


class AddressResponse(BaseModel):
    """Response schema for a saved address."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", description="Address ID")
    user: str = Field(..., description="Owner ID")
    street: str
    city: str
    state: str
    phone_number: str
    postal_code: str
    country: str
    type: str
