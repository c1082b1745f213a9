"""ORM model for issued refresh tokens and their revocation state."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from jobmonitor.models.base import Base
from jobmonitor.models.user import utcnow


class RefreshToken(Base):
    """
    One row per issued refresh token.

    token_hash is the SHA-256 hex digest of the token string; the raw token is never
    stored. revoked only ever goes from False to True. Rows are removed by the token
    sweep once expired or revoked, and with their user (ON DELETE CASCADE).
    """

    __tablename__ = "refresh_tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    token_hash = Column(String(64), nullable=False, unique=True, index=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    revoked = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    user = relationship("User", back_populates="refresh_tokens")
