"""Login, token refresh and logout flows."""

import logging
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from jobmonitor.core.errors import InvalidTokenError, RevokedTokenError
from jobmonitor.core.tokens import TokenCodec, TokenType
from jobmonitor.models.user import User
from jobmonitor.schemas.auth import JwtAuthenticationResponse, SecurityPrincipal
from jobmonitor.schemas.user import UserDto
from jobmonitor.services.authentication import AuthenticationGate
from jobmonitor.services.refresh_tokens import RefreshTokenStore

if TYPE_CHECKING:
    from jobmonitor.core.config import Settings

logger = logging.getLogger(__name__)


class AuthService:
    """Each public method is one transaction: it commits on success only."""

    def __init__(self, db: Session, codec: TokenCodec, settings: "Settings") -> None:
        self.db = db
        self.codec = codec
        self.gate = AuthenticationGate(db)
        self.refresh_tokens = RefreshTokenStore(
            db, codec, timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
        )
        self.access_ttl = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        self.rotate_refresh_tokens = settings.REFRESH_TOKEN_ROTATION

    def login(self, username: str, password: str) -> JwtAuthenticationResponse:
        """Verify credentials and account status; issue an access and a refresh token."""
        principal = self.gate.authenticate(username, password)
        self.gate.check_account_status(principal)

        access_token = self.codec.issue(principal, TokenType.ACCESS, self.access_ttl)
        refresh_token = self.refresh_tokens.issue(principal)
        self.db.commit()

        logger.info("Login succeeded for user_id=%s", principal.id)
        return self._response(principal.id, access_token, refresh_token)

    def refresh(self, refresh_token: str, now: datetime | None = None) -> JwtAuthenticationResponse:
        """
        Exchange a valid refresh token for a new access token.

        With rotation enabled the presented token is revoked and a new one issued in
        the same transaction; losing a race against a concurrent refresh of the same
        token raises RevokedTokenError.
        """
        claims, _row = self.refresh_tokens.validate(refresh_token, now=now)

        user = self.db.get(User, claims.user_id)
        if user is None:
            raise InvalidTokenError("User no longer exists")
        principal = SecurityPrincipal.from_user(user)
        self.gate.check_account_status(principal)

        if self.rotate_refresh_tokens:
            if not self.refresh_tokens.revoke(refresh_token):
                logger.warning(
                    "Refresh token for user_id=%s was revoked concurrently", principal.id
                )
                raise RevokedTokenError()
            refresh_token = self.refresh_tokens.issue(principal)

        access_token = self.codec.issue(principal, TokenType.ACCESS, self.access_ttl)
        self.db.commit()
        return self._response(principal.id, access_token, refresh_token)

    def logout(self, refresh_token: str) -> bool:
        """Revoke the presented refresh token. Returns False if it was already inactive."""
        claims = self.codec.parse(refresh_token)
        if self.codec.token_type(claims) is not TokenType.REFRESH:
            raise InvalidTokenError("Refresh token required")
        revoked = self.refresh_tokens.revoke(refresh_token)
        self.db.commit()
        if revoked:
            logger.info("Logout: refresh token revoked for user_id=%s", claims.user_id)
        else:
            logger.info("Logout: refresh token already inactive (user_id=%s)", claims.user_id)
        return revoked

    def _response(
        self, user_id: int, access_token: str, refresh_token: str
    ) -> JwtAuthenticationResponse:
        user = self.db.get(User, user_id)
        return JwtAuthenticationResponse(
            access_token=access_token,
            refresh_token=refresh_token,
            token_type="Bearer",
            expires_in=int(self.access_ttl.total_seconds() * 1000),
            user=UserDto.model_validate(user),
        )
