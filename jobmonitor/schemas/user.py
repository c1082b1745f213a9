"""Schemas for user profiles and the admin user-management endpoints."""

from datetime import datetime

from pydantic import EmailStr, Field

from jobmonitor.core.security import (
    EMAIL_MAX_LEN,
    NAME_MAX_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)
from jobmonitor.models.user import Role
from jobmonitor.schemas.common import CamelModel


class UserDto(CamelModel):
    """User as exposed by the API (never includes the password hash)."""

    id: int
    username: str
    email: str
    first_name: str
    last_name: str
    full_name: str
    role: Role
    enabled: bool
    account_non_expired: bool
    account_non_locked: bool
    credentials_non_expired: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class SignUpRequest(CamelModel):
    """Registration data (self-service registration and admin-created accounts)."""

    username: str = Field(..., min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN)
    email: EmailStr = Field(..., max_length=EMAIL_MAX_LEN)
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    first_name: str = Field(..., min_length=1, max_length=NAME_MAX_LEN)
    last_name: str = Field(..., min_length=1, max_length=NAME_MAX_LEN)


class UpdateProfileRequest(CamelModel):
    """Fields a user may change on their own profile. Role is not among them."""

    email: EmailStr = Field(..., max_length=EMAIL_MAX_LEN)
    first_name: str = Field(..., min_length=1, max_length=NAME_MAX_LEN)
    last_name: str = Field(..., min_length=1, max_length=NAME_MAX_LEN)


class UpdateUserRequest(UpdateProfileRequest):
    """Admin update: profile fields plus the role."""

    role: Role


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)
    new_password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)


class AdminStatsResponse(CamelModel):
    """Response for GET /admin/stats."""

    total_users: int
    admin_users: int
    active_refresh_tokens: int
    system_status: str = "Operational"
