"""Pydantic schemas for registration and login."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from ..patrons.schemas import Email
from .models import DEFAULT_ROLE


class RegisterRequest(BaseModel):
    """Schema for registering an API user."""

    username: str = Field(..., min_length=3, max_length=100)
    email: Email
    password: str = Field(..., min_length=6, max_length=128)
    role: str = Field(DEFAULT_ROLE, min_length=1, max_length=50)

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 3:
            raise ValueError("must be at least 3 characters")
        return v


class LoginRequest(BaseModel):
    """Schema for logging in."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    """Schema for user responses. Never includes the password hash."""

    id: str
    username: str
    email: str
    role: str
    created_at: datetime

    model_config = {"from_attributes": True}


class TokenResponse(BaseModel):
    """Schema for a successful login."""

    access_token: str
    token_type: str = "Bearer"
    user: UserResponse
