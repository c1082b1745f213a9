"""Per-request bearer-token authentication."""

import logging
from dataclasses import dataclass

from jobmonitor.core.errors import AuthError, ExpiredTokenError, InvalidTokenError
from jobmonitor.core.tokens import TokenClaims, TokenCodec, TokenType
from jobmonitor.models.user import Role
from jobmonitor.schemas.auth import SecurityPrincipal

logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"


@dataclass(frozen=True)
class AuthenticationResult:
    """Outcome of authenticating one request; both fields None means anonymous."""

    principal: SecurityPrincipal | None = None
    error: AuthError | None = None


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token from an 'Authorization: Bearer <token>' header value, if any."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != BEARER_SCHEME:
        return None
    token = token.strip()
    return token or None


def principal_from_claims(claims: TokenClaims) -> SecurityPrincipal:
    """Build the request principal from access-token claims alone (no DB lookup)."""
    role = None
    for candidate in (Role.ADMIN, Role.USER):
        if candidate.authority in claims.authorities:
            role = candidate
            break
    return SecurityPrincipal(
        id=claims.user_id,
        username=claims.subject,
        email=claims.email,
        role=role,
        authorities=claims.authorities,
    )


class RequestAuthenticator:
    """
    Validates the bearer token of a request and derives its principal.

    Never raises: failures are returned so the authorization stage decides whether
    the path needed a principal at all.
    """

    def __init__(self, codec: TokenCodec) -> None:
        self.codec = codec

    def authenticate(self, authorization: str | None) -> AuthenticationResult:
        token = extract_bearer_token(authorization)
        if token is None:
            return AuthenticationResult()

        try:
            claims = self.codec.parse(token)
        except InvalidTokenError as e:
            logger.debug("Rejected bearer token: %s", e.message)
            return AuthenticationResult(error=e)

        if self.codec.token_type(claims) is not TokenType.ACCESS:
            logger.info(
                "Rejected %s token used as access token (user_id=%s)",
                claims.token_type.value,
                claims.user_id,
            )
            return AuthenticationResult(error=InvalidTokenError("Access token required"))

        if self.codec.is_expired(claims):
            return AuthenticationResult(
                error=ExpiredTokenError("Access token has expired. Please refresh your token.")
            )

        return AuthenticationResult(principal=principal_from_claims(claims))
