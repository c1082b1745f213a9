"""Username/password verification against the users table."""

import logging
import secrets
from functools import lru_cache

from sqlalchemy.orm import Session

from jobmonitor.core.errors import (
    AccountDisabled,
    AccountExpired,
    AccountLocked,
    CredentialsExpired,
    InvalidCredentials,
    UserNotFound,
)
from jobmonitor.core.security import hash_password, verify_password
from jobmonitor.models.user import User
from jobmonitor.schemas.auth import SecurityPrincipal

logger = logging.getLogger(__name__)


@lru_cache
def _dummy_password_hash() -> str:
    # Compared against when the username is unknown so both failures cost one bcrypt check.
    return hash_password(secrets.token_urlsafe(16))


class AuthenticationGate:
    """Verifies submitted credentials and produces a SecurityPrincipal."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def authenticate(self, username: str, password: str) -> SecurityPrincipal:
        """
        Look up username (exact, case-sensitive) and check password against its bcrypt hash.

        Raises UserNotFound or InvalidCredentials; both render as the same client
        message, only the log line tells them apart.
        """
        user = self.db.query(User).filter(User.username == username).first()
        if user is None:
            verify_password(password, _dummy_password_hash())
            logger.info("Login failed: unknown username %r", username)
            raise UserNotFound()
        if not verify_password(password, user.password_hash):
            logger.info("Login failed: wrong password for user_id=%s", user.id)
            raise InvalidCredentials()
        return SecurityPrincipal.from_user(user)

    @staticmethod
    def check_account_status(principal: SecurityPrincipal) -> None:
        """Raise if any account-status flag forbids authentication."""
        if not principal.enabled:
            logger.info("Login refused: account disabled (user_id=%s)", principal.id)
            raise AccountDisabled()
        if not principal.account_non_locked:
            logger.info("Login refused: account locked (user_id=%s)", principal.id)
            raise AccountLocked()
        if not principal.account_non_expired:
            logger.info("Login refused: account expired (user_id=%s)", principal.id)
            raise AccountExpired()
        if not principal.credentials_non_expired:
            logger.info("Login refused: credentials expired (user_id=%s)", principal.id)
            raise CredentialsExpired()
