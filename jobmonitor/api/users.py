"""Self-service endpoints for the authenticated user (ADMIN or USER)."""

from fastapi import APIRouter

from jobmonitor.api.deps import CurrentPrincipal, UserServiceDep
from jobmonitor.schemas.common import MessageResponse
from jobmonitor.schemas.user import ChangePasswordRequest, UpdateProfileRequest, UserDto

router = APIRouter()


@router.get("/profile", response_model=UserDto)
def get_profile(principal: CurrentPrincipal, users: UserServiceDep) -> UserDto:
    """
    Profile of the caller. This is the "who am I" endpoint: paths under /auth are
    public and never carry a principal, so there is no /auth/me.
    """
    return UserDto.model_validate(users.get_by_username(principal.username))


@router.put("/profile", response_model=UserDto)
def update_profile(
    body: UpdateProfileRequest,
    principal: CurrentPrincipal,
    users: UserServiceDep,
) -> UserDto:
    """Update email and name. The role cannot be changed here."""
    return UserDto.model_validate(users.update_profile(principal.username, body))


@router.post("/change-password", response_model=MessageResponse)
def change_password(
    body: ChangePasswordRequest,
    principal: CurrentPrincipal,
    users: UserServiceDep,
) -> MessageResponse:
    """Change the caller's password; all of the caller's refresh tokens are revoked."""
    users.change_password(principal.username, body.current_password, body.new_password)
    return MessageResponse(message="Password changed successfully")
