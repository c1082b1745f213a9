"""Persistence and validation of refresh tokens.

Methods add or update rows in the caller's session without committing, so a
rotation (revoke old + store new) lands in a single transaction.
"""

import hashlib
import logging
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from jobmonitor.core.errors import ExpiredTokenError, InvalidTokenError, RevokedTokenError
from jobmonitor.core.tokens import TokenClaims, TokenCodec, TokenType, ensure_utc
from jobmonitor.models.refresh_token import RefreshToken
from jobmonitor.schemas.auth import SecurityPrincipal

logger = logging.getLogger(__name__)


def hash_token(token: str) -> str:
    """SHA-256 hex digest used as the lookup key; raw tokens are never stored."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class RefreshTokenStore:
    def __init__(self, db: Session, codec: TokenCodec, ttl: timedelta) -> None:
        self.db = db
        self.codec = codec
        self.ttl = ttl

    def issue(self, principal: SecurityPrincipal) -> str:
        """Sign a new refresh token for principal and record it."""
        token = self.codec.issue(principal, TokenType.REFRESH, self.ttl)
        claims = self.codec.parse(token)
        self.db.add(
            RefreshToken(
                token_hash=hash_token(token),
                user_id=principal.id,
                expires_at=claims.expires_at,
                revoked=False,
                created_at=claims.issued_at,
            )
        )
        self.db.flush()
        return token

    def find(self, token: str) -> RefreshToken | None:
        return (
            self.db.query(RefreshToken)
            .filter(RefreshToken.token_hash == hash_token(token))
            .first()
        )

    def validate(
        self, token: str, now: datetime | None = None
    ) -> tuple[TokenClaims, RefreshToken]:
        """
        Check that token is a known, unrevoked, unexpired refresh token.

        Revocation is checked before expiry: a revoked token always reports as revoked.
        Raises InvalidTokenError, RevokedTokenError or ExpiredTokenError.
        """
        claims = self.codec.parse(token)
        if self.codec.token_type(claims) is not TokenType.REFRESH:
            logger.info("Refresh refused: %s token presented (user_id=%s)",
                        claims.token_type.value, claims.user_id)
            raise InvalidTokenError("Refresh token required")

        row = self.find(token)
        if row is None or row.user_id != claims.user_id:
            logger.info("Refresh refused: unknown refresh token (user_id=%s)", claims.user_id)
            raise InvalidTokenError("Unknown refresh token")

        if row.revoked:
            logger.warning(
                "Refresh refused: revoked refresh token reused (user_id=%s, token_id=%s)",
                row.user_id,
                row.id,
            )
            raise RevokedTokenError()

        current = ensure_utc(now) if now is not None else self.codec.now()
        if ensure_utc(row.expires_at) < current or self.codec.is_expired(claims, current):
            raise ExpiredTokenError("Refresh token has expired. Please login again.")

        return claims, row

    def revoke(self, token: str) -> bool:
        """
        Revoke token if it is still active. Returns False when it was unknown or already
        revoked; the conditional update makes concurrent revocations of one token race-free.
        """
        updated = (
            self.db.query(RefreshToken)
            .filter(
                RefreshToken.token_hash == hash_token(token),
                RefreshToken.revoked.is_(False),
            )
            .update({RefreshToken.revoked: True}, synchronize_session="fetch")
        )
        return updated == 1

    def revoke_all_for_user(self, user_id: int) -> int:
        """Revoke every active refresh token of a user (password change, forced logout)."""
        updated = (
            self.db.query(RefreshToken)
            .filter(RefreshToken.user_id == user_id, RefreshToken.revoked.is_(False))
            .update({RefreshToken.revoked: True}, synchronize_session="fetch")
        )
        if updated:
            logger.info("Revoked %s refresh token(s) for user_id=%s", updated, user_id)
        return updated

    def count_active(self, now: datetime | None = None) -> int:
        current = ensure_utc(now) if now is not None else self.codec.now()
        return (
            self.db.query(RefreshToken)
            .filter(RefreshToken.revoked.is_(False), RefreshToken.expires_at >= current)
            .count()
        )
