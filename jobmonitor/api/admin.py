"""User administration (ADMIN only; enforced by the authorization policy)."""

from fastapi import APIRouter

from jobmonitor.api.deps import CurrentPrincipal, UserServiceDep
from jobmonitor.models.user import Role
from jobmonitor.schemas.common import ErrorResponse, MessageResponse
from jobmonitor.schemas.user import (
    AdminStatsResponse,
    SignUpRequest,
    UpdateUserRequest,
    UserDto,
)

router = APIRouter()

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "User not found"}}


@router.get("/users", response_model=list[UserDto])
def list_users(users: UserServiceDep) -> list[UserDto]:
    return [UserDto.model_validate(u) for u in users.list_users()]


@router.get("/users/{user_id}", response_model=UserDto, responses=_NOT_FOUND)
def get_user(user_id: int, users: UserServiceDep) -> UserDto:
    return UserDto.model_validate(users.get_user(user_id))


@router.post("/users", response_model=UserDto)
def create_user(body: SignUpRequest, principal: CurrentPrincipal, users: UserServiceDep) -> UserDto:
    """Create a USER account."""
    return UserDto.model_validate(users.create_user(body, Role.USER, actor=principal.username))


@router.post("/users/admin", response_model=UserDto)
def create_admin_user(
    body: SignUpRequest, principal: CurrentPrincipal, users: UserServiceDep
) -> UserDto:
    """Create an ADMIN account. Grants full access."""
    return UserDto.model_validate(users.create_user(body, Role.ADMIN, actor=principal.username))


@router.put("/users/{user_id}", response_model=UserDto, responses=_NOT_FOUND)
def update_user(
    user_id: int,
    body: UpdateUserRequest,
    principal: CurrentPrincipal,
    users: UserServiceDep,
) -> UserDto:
    """Update profile fields and role. A role change revokes the user's refresh tokens."""
    return UserDto.model_validate(users.update_user(user_id, body, actor=principal.username))


@router.post("/users/{user_id}/toggle-enabled", response_model=MessageResponse, responses=_NOT_FOUND)
def toggle_user_enabled(
    user_id: int, principal: CurrentPrincipal, users: UserServiceDep
) -> MessageResponse:
    """Enable or disable an account. Disabled users cannot log in or refresh."""
    users.toggle_enabled(user_id, actor=principal.username)
    return MessageResponse(message="User status updated successfully")


@router.post("/users/{user_id}/revoke-tokens", response_model=MessageResponse, responses=_NOT_FOUND)
def revoke_user_tokens(
    user_id: int, principal: CurrentPrincipal, users: UserServiceDep
) -> MessageResponse:
    """Forced logout: revoke every refresh token of the user."""
    revoked = users.revoke_tokens(user_id, actor=principal.username)
    return MessageResponse(message=f"Revoked {revoked} refresh token(s)")


@router.delete("/users/{user_id}", response_model=MessageResponse, responses=_NOT_FOUND)
def delete_user(user_id: int, principal: CurrentPrincipal, users: UserServiceDep) -> MessageResponse:
    """Permanently delete a user and their refresh tokens. Consider disabling instead."""
    users.delete_user(user_id, actor=principal.username)
    return MessageResponse(message="User deleted successfully")


@router.get("/stats", response_model=AdminStatsResponse)
def get_admin_stats(users: UserServiceDep) -> AdminStatsResponse:
    return users.stats()
