"""
User Schemas.

Pydantic schemas for account registration, login and profile endpoints.
Passwords are accepted on input only and never appear in a response.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

class UserRegister(BaseModel):
    """Schema for registering a new user."""

    username: str = Field(..., min_length=1, examples=["jane"])
    email: str = Field(..., min_length=1, examples=["jane@example.com"])
    password: str = Field(..., min_length=1)
    photo: str | None = Field(default=None, description="Path to an uploaded photo")


class UserLogin(BaseModel):
    """Schema for login."""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserProfileUpdate(BaseModel):
    """Schema for profile updates. Only provided fields are changed."""

    username: str | None = Field(default=None, min_length=1)
    password: str | None = Field(default=None, min_length=1)
    photo: str | None = None


class UserResponse(BaseModel):
    """User record as returned by the API."""

    id: str
    username: str
    email: str
    photo: str | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserProfileResponse(BaseModel):
    """Public profile view. photo is an absolute URL when set."""

    username: str
    email: str
    photo: str | None = None
