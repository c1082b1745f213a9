"""Request/response schemas for auth endpoints and the request principal."""

from pydantic import BaseModel, ConfigDict, Field

from jobmonitor.models.user import Role
from jobmonitor.schemas.common import CamelModel
from jobmonitor.schemas.user import UserDto


class LoginRequest(BaseModel):
    """Credentials for login."""

    username: str = Field(..., min_length=1, max_length=255, description="Username")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class RefreshTokenRequest(CamelModel):
    """Refresh token presented to /refresh and /logout."""

    refresh_token: str = Field(..., min_length=1, description="Refresh token from login")


class JwtAuthenticationResponse(CamelModel):
    """Tokens and user returned after login or refresh."""

    access_token: str = Field(..., description="JWT access token for API calls")
    refresh_token: str = Field(..., description="JWT refresh token for obtaining new access tokens")
    token_type: str = Field(default="Bearer", description="Token type")
    expires_in: int = Field(..., description="Access token lifetime in milliseconds")
    user: UserDto


class SecurityPrincipal(BaseModel):
    """
    Authenticated identity attached to a request.

    Built from a User row by the authentication gate, or from access-token claims by
    the request authenticator (in which case the status flags default to True: the
    token was only issued to a usable account).
    """

    model_config = ConfigDict(frozen=True)

    id: int
    username: str
    email: str | None = None
    role: Role | None = None
    authorities: frozenset[str] = frozenset()
    enabled: bool = True
    account_non_expired: bool = True
    account_non_locked: bool = True
    credentials_non_expired: bool = True

    @classmethod
    def from_user(cls, user) -> "SecurityPrincipal":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            role=user.role,
            authorities=frozenset({Role(user.role).authority}),
            enabled=user.enabled,
            account_non_expired=user.account_non_expired,
            account_non_locked=user.account_non_locked,
            credentials_non_expired=user.credentials_non_expired,
        )

    def has_any_role(self, *roles: Role) -> bool:
        return any(role.authority in self.authorities for role in roles)
