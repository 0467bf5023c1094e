"""
Authentication and user API schemas for request/response validation.
"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from .common import check_object_id

# bcrypt ignores input past 72 bytes
MAX_PASSWORD_BYTES = 72


def _check_password(value: str) -> str:
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f'Password must be at most {MAX_PASSWORD_BYTES} bytes long')
    return value


# Request Schemas

class SignupRequest(BaseModel):
    """Request schema for creating an account."""
    name: str = Field(..., min_length=1, max_length=100, description="Full name")
    email: EmailStr = Field(..., description="Email address, must be unique")
    password: str = Field(..., min_length=8, description="Plain-text password")

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.lower()

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        return _check_password(v)


class LoginRequest(BaseModel):
    """Request schema for logging in."""
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., min_length=1, description="Plain-text password")

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.lower()


class ForgotPasswordRequest(BaseModel):
    """Request schema for asking a password reset link."""
    email: EmailStr = Field(..., description="Email address of the account")

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.lower()


class ResetPasswordRequest(BaseModel):
    """Request schema for setting a new password with a reset link."""
    user_id: str = Field(..., description="User ID taken from the reset link")
    token: str = Field(..., min_length=1, description="Raw reset token taken from the reset link")
    password: str = Field(..., min_length=8, description="New plain-text password")

    @field_validator('user_id')
    @classmethod
    def validate_user_id(cls, v):
        return check_object_id(v, "user")

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        return _check_password(v)


class UpdateUserRequest(BaseModel):
    """Request schema for updating a user profile."""
    name: Optional[str] = Field(None, min_length=1, max_length=100, description="Full name")
    email: Optional[EmailStr] = Field(None, description="Email address")

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.lower() if v is not None else v


# Response Schemas

class SanitizedUserResponse(BaseModel):
    """The user fields that are safe to expose after authentication."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", description="User ID")
    email: str = Field(..., description="Email address")
    is_verified: bool = Field(True, description="Whether the email is verified")
    is_admin: bool = Field(False, description="Whether the user is an administrator")


class UserResponse(SanitizedUserResponse):
    """Full user profile, without the password hash."""
    name: str = Field(..., description="Full name")
    created_at: Optional[datetime] = Field(None, description="Account creation timestamp")


class PublicUserResponse(BaseModel):
    """Name-only view of a user."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", description="User ID")
    name: Optional[str] = Field(None, description="Full name")
