"""User and auth schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class UserRegister(BaseModel):
    """Schema for registering a driver account."""

    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$", max_length=255)
    password: str = Field(..., min_length=6, max_length=128)
    phone_number: Optional[str] = Field(None, max_length=32)


class UserLogin(BaseModel):
    """Schema for logging in."""

    email: str
    password: str


class UserResponse(BaseModel):
    """Schema for user response."""

    id: UUID
    name: str
    email: str
    role: str
    phone_number: Optional[str]
    created_at: datetime

    model_config = {"from_attributes": True}


class TokenResponse(BaseModel):
    """Schema for an issued access token."""

    access_token: str
    token_type: str = "bearer"
    user: UserResponse
