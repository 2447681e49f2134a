"""
User Pydantic schemas.
"""

from typing import Optional
from uuid import UUID
from datetime import datetime

from pydantic import EmailStr

from jobmete.schemas.base import CamelModel


class UserCreate(CamelModel):
    """Schema for registering a new account."""

    email: EmailStr
    display_name: Optional[str] = None
    password: Optional[str] = None


class UserRead(CamelModel):
    """Schema for reading user data (API response)."""

    id: UUID
    email: str
    display_name: str
    is_active: bool
    last_login_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class LoginRequest(CamelModel):
    """Schema for login request."""

    email: EmailStr
    password: str


class LoginResponse(CamelModel):
    """Schema for login response."""

    access_token: str
    token_type: str = "bearer"
    user: UserRead


class TokenData(CamelModel):
    """Schema for token payload data."""

    user_id: UUID
    email: str
