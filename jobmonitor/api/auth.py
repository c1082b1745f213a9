"""Login, token refresh, logout and self-service registration (public endpoints)."""

from fastapi import APIRouter, status

from jobmonitor.api.deps import AuthServiceDep, UserServiceDep
from jobmonitor.models.user import Role
from jobmonitor.schemas.auth import (
    JwtAuthenticationResponse,
    LoginRequest,
    RefreshTokenRequest,
)
from jobmonitor.schemas.common import ErrorResponse, MessageResponse
from jobmonitor.schemas.user import SignUpRequest, UserDto

router = APIRouter()

_UNAUTHORIZED = {401: {"model": ErrorResponse, "description": "Authentication failed"}}


@router.post("/login", response_model=JwtAuthenticationResponse, responses=_UNAUTHORIZED)
def login(body: LoginRequest, service: AuthServiceDep) -> JwtAuthenticationResponse:
    """
    Authenticate with username and password; returns an access and a refresh token.
    Include the access token in the Authorization header as: Bearer <accessToken>
    """
    return service.login(body.username, body.password)


@router.post("/refresh", response_model=JwtAuthenticationResponse, responses=_UNAUTHORIZED)
def refresh(body: RefreshTokenRequest, service: AuthServiceDep) -> JwtAuthenticationResponse:
    """
    Exchange a refresh token for a new access token. The presented refresh token is
    rotated (revoked and replaced) when rotation is enabled.
    """
    return service.refresh(body.refresh_token)


@router.post("/logout", response_model=MessageResponse, responses=_UNAUTHORIZED)
def logout(body: RefreshTokenRequest, service: AuthServiceDep) -> MessageResponse:
    """Revoke the presented refresh token. Revoking an already revoked token is a no-op."""
    service.logout(body.refresh_token)
    return MessageResponse(message="Logged out successfully")


@router.post(
    "/register",
    response_model=UserDto,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse, "description": "Username or email taken"}},
)
def register(body: SignUpRequest, users: UserServiceDep) -> UserDto:
    """Create a USER account."""
    user = users.create_user(body, Role.USER)
    return UserDto.model_validate(user)
