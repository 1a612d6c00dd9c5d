"""
Request and response bodies for the account endpoints.
"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field

from ..models.user import UserRole


class UserRegister(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, description="At least 8 characters")
    name: Optional[str] = Field(None, max_length=255)


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class TokenRefresh(BaseModel):
    refresh_token: str


class Token(BaseModel):
    """Access/refresh pair returned by register, login and refresh."""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class UserUpdate(BaseModel):
    """Fields a user may change on their own profile."""
    name: Optional[str] = Field(None, max_length=255)


class RoleUpdate(BaseModel):
    role: UserRole


class UserResponse(BaseModel):
    """Team member as shown to other users (never includes the password hash)."""
    id: str
    email: str
    name: Optional[str] = None
    role: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
