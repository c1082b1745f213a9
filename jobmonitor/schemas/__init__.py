"""Pydantic request/response schemas."""

from jobmonitor.schemas.auth import (
    JwtAuthenticationResponse,
    LoginRequest,
    RefreshTokenRequest,
    SecurityPrincipal,
)
from jobmonitor.schemas.common import ErrorResponse, MessageResponse
from jobmonitor.schemas.health import HealthResponse
from jobmonitor.schemas.user import (
    AdminStatsResponse,
    ChangePasswordRequest,
    SignUpRequest,
    UpdateProfileRequest,
    UpdateUserRequest,
    UserDto,
)

__all__ = [
    "AdminStatsResponse",
    "ChangePasswordRequest",
    "ErrorResponse",
    "HealthResponse",
    "JwtAuthenticationResponse",
    "LoginRequest",
    "MessageResponse",
    "RefreshTokenRequest",
    "SecurityPrincipal",
    "SignUpRequest",
    "UpdateProfileRequest",
    "UpdateUserRequest",
    "UserDto",
]
