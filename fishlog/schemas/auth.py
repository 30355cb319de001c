"""
Authentication schemas.

Pydantic schemas for registration, login, API key responses, the
angler profile and account administration.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, EmailStr, Field

from fishlog.schemas.base import BaseSchema, TimestampSchema


class Token(BaseModel):
    """Token schema for authentication."""
    access_token: str
    token_type: str = "bearer"


class UserBase(BaseSchema):
    """Base user schema."""
    email: EmailStr
    full_name: Optional[str] = Field(None, max_length=200)


class UserCreate(UserBase):
    """Schema for creating a new user."""
    password: str = Field(..., min_length=8, max_length=128)


class ProfileFields(BaseSchema):
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    address: Optional[str] = Field(None, max_length=500)
    phone: Optional[str] = Field(None, max_length=30, pattern=r"^[0-9+()\-. ]*$")


class User(UserBase, ProfileFields, TimestampSchema):
    """Complete user schema with timestamps."""
    id: int
    is_active: bool
    is_superuser: bool = False
    api_key: str


class Profile(UserBase, ProfileFields):
    """The angler's own profile; email is shown but cannot be changed here."""


class ProfileUpdate(ProfileFields):
    """Partial profile update; only the fields sent are changed."""
    full_name: Optional[str] = Field(None, max_length=200)


class AccountDelete(BaseModel):
    """Password confirmation for deleting one's own account."""
    password: str


class PasswordChange(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=8, max_length=128)


class APIKeyResponse(BaseSchema):
    """Response schema for API key information."""
    user_id: int
    email: EmailStr
    api_key: str
    is_active: bool
    created_at: datetime


class TokenResponse(Token):
    """Response schema for token generation."""
    user: User
    expires_in: int  # seconds


class AdminUserSummary(BaseSchema):
    """A row in the admin user list."""
    id: int
    email: EmailStr
    full_name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    is_active: bool
    is_superuser: bool
    created_at: datetime
    entry_count: int = 0
    license_count: int = 0


class AdminUser(UserBase, ProfileFields, TimestampSchema):
    """Full account details as seen by an administrator; no API key."""
    id: int
    is_active: bool
    is_superuser: bool


class AdminUserUpdate(ProfileFields):
    """Fields an administrator may change on an account."""
    email: Optional[EmailStr] = None
    full_name: Optional[str] = Field(None, max_length=200)
    is_active: Optional[bool] = None
    is_superuser: Optional[bool] = None


class PasswordReset(BaseModel):
    new_password: str = Field(..., min_length=8, max_length=128)


class RecentActivity(BaseModel):
    entry_id: int
    email: str
    created_at: datetime
    city_state: Optional[str] = None


class SystemStats(BaseModel):
    """Counts across all accounts."""
    total_users: int
    total_entries: int
    total_licenses: int
    total_saved_rivers: int
    recent_activity: List[RecentActivity]
