"""Signed access/refresh token issuance and parsing (HMAC JWT via PyJWT).

The codec checks signatures and claim structure only. Expiry is reported by
``is_expired`` and enforced by the caller, so an expired refresh token can still
be recognised (and answered with "expired" rather than "invalid").
"""

import enum
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import jwt

from jobmonitor.core.config import JWT_SECRET_MIN_LEN, SUPPORTED_JWT_ALGORITHMS
from jobmonitor.core.errors import InvalidTokenError, TokenConfigurationError

if TYPE_CHECKING:
    from jobmonitor.core.config import Settings
    from jobmonitor.schemas.auth import SecurityPrincipal

Clock = Callable[[], datetime]

# Claims every token must carry; anything else is structurally malformed.
REQUIRED_CLAIMS = ("sub", "userId", "tokenType", "iat", "exp")


class TokenType(str, enum.Enum):
    ACCESS = "ACCESS"
    REFRESH = "REFRESH"


@dataclass(frozen=True)
class TokenClaims:
    """Verified claim set of a token."""

    subject: str
    user_id: int
    token_type: TokenType
    issued_at: datetime
    expires_at: datetime
    email: str | None = None
    authorities: frozenset[str] = field(default_factory=frozenset)
    token_id: str | None = None


def utc_now() -> datetime:
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes (e.g. read back from SQLite) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class TokenCodec:
    """Issues and parses signed tokens with a server-held HMAC secret."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS512",
        clock: Clock | None = None,
    ) -> None:
        if not secret or len(secret) < JWT_SECRET_MIN_LEN:
            raise TokenConfigurationError(
                f"JWT signing secret must be at least {JWT_SECRET_MIN_LEN} characters"
            )
        if algorithm not in SUPPORTED_JWT_ALGORITHMS:
            raise TokenConfigurationError(
                f"Unsupported JWT algorithm {algorithm!r}; "
                f"expected one of {', '.join(SUPPORTED_JWT_ALGORITHMS)}"
            )
        self._secret = secret
        self.algorithm = algorithm
        self._clock = clock or utc_now

    @classmethod
    def from_settings(cls, settings: "Settings", clock: Clock | None = None) -> "TokenCodec":
        return cls(
            settings.JWT_SECRET.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
            clock=clock,
        )

    def now(self) -> datetime:
        return self._clock()

    def issue(
        self,
        principal: "SecurityPrincipal",
        token_type: TokenType,
        ttl: timedelta,
    ) -> str:
        """Sign a token for principal valid from now until now + ttl."""
        now = self._clock()
        payload: dict[str, Any] = {
            "sub": principal.username,
            "userId": principal.id,
            "tokenType": token_type.value,
            "iat": now,
            "exp": now + ttl,
            # Two tokens issued in the same second must still differ.
            "jti": uuid.uuid4().hex,
        }
        if token_type is TokenType.ACCESS:
            payload["email"] = principal.email
            payload["authorities"] = sorted(principal.authorities)
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def parse(self, token: str) -> TokenClaims:
        """
        Verify signature and structure; return the claims.
        Raises InvalidTokenError on a bad signature, malformed token or missing claim.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": list(REQUIRED_CLAIMS),
                },
            )
        except jwt.PyJWTError as e:
            raise InvalidTokenError("Invalid token") from e
        return _claims_from_payload(payload)

    def is_expired(self, claims: TokenClaims, now: datetime | None = None) -> bool:
        """True when expiresAt is strictly before now."""
        current = ensure_utc(now) if now is not None else self._clock()
        return claims.expires_at < current

    @staticmethod
    def token_type(claims: TokenClaims) -> TokenType:
        return claims.token_type


def _claims_from_payload(payload: dict[str, Any]) -> TokenClaims:
    try:
        token_type = TokenType(payload["tokenType"])
    except ValueError as e:
        raise InvalidTokenError("Invalid token type") from e

    user_id = payload["userId"]
    if isinstance(user_id, bool) or not isinstance(user_id, int):
        raise InvalidTokenError("Invalid token payload")

    subject = payload["sub"]
    if not isinstance(subject, str) or not subject:
        raise InvalidTokenError("Invalid token payload")

    authorities = payload.get("authorities") or []
    if not isinstance(authorities, list) or not all(isinstance(a, str) for a in authorities):
        raise InvalidTokenError("Invalid token payload")

    email = payload.get("email")
    if email is not None and not isinstance(email, str):
        raise InvalidTokenError("Invalid token payload")

    try:
        issued_at = datetime.fromtimestamp(payload["iat"], UTC)
        expires_at = datetime.fromtimestamp(payload["exp"], UTC)
    except (TypeError, ValueError, OverflowError) as e:
        raise InvalidTokenError("Invalid token timestamps") from e

    return TokenClaims(
        subject=subject,
        user_id=user_id,
        token_type=token_type,
        issued_at=issued_at,
        expires_at=expires_at,
        email=email,
        authorities=frozenset(authorities),
        token_id=payload.get("jti"),
    )
