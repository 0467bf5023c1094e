"""
Common schemas used across the API.
"""
from typing import Any, List, Optional
from pydantic import BaseModel, Field
from bson import ObjectId


def check_object_id(value: Optional[str], resource_name: str) -> Optional[str]:
    """Shared body of the ``*_id`` validators on request schemas."""
    if value is not None and not ObjectId.is_valid(value):
        raise ValueError(f'Invalid {resource_name} ID format')
    return value


class HealthCheckResponse(BaseModel):
    """Response schema for health check endpoint."""
    status: str = Field(..., description="Application health status")
    database: str = Field(..., description="Database connection status")
    timestamp: str = Field(..., description="Health check timestamp")
    version: str = Field(..., description="Application version")


class RootResponse(BaseModel):
    """Response schema for root endpoint."""
    message: str = Field(..., description="Liveness message")
    version: str = Field(..., description="API version")
    docs: str = Field(..., description="Documentation URL")
    health: str = Field(..., description="Health check URL")


class MessageResponse(BaseModel):
    """Plain acknowledgement with a human-readable message."""
    message: str = Field(..., description="Human-readable message")


class ValidationErrorDetail(BaseModel):
    """Individual validation error detail."""
    field: str = Field(..., description="Field that failed validation")
    message: str = Field(..., description="Error message")
    input_value: Any = Field(None, description="Value that caused the error")


class ValidationErrorResponse(BaseModel):
    """Response schema for validation errors."""
    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Human-readable error message")
    details: List[ValidationErrorDetail] = Field(..., description="Detailed validation errors")
