"""ORM model for application users (credentials, RBAC role, account status)."""

import enum
from datetime import UTC, datetime

from sqlalchemy import Boolean, Column, DateTime, Enum, Integer, String
from sqlalchemy.orm import relationship

from jobmonitor.models.base import Base


def utcnow() -> datetime:
    return datetime.now(UTC)


class Role(str, enum.Enum):
    """Exactly one role per user."""

    ADMIN = "ADMIN"
    USER = "USER"

    @property
    def authority(self) -> str:
        """Authority string carried in access tokens, e.g. ROLE_ADMIN."""
        return f"ROLE_{self.value}"


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    The four status flags are toggled independently; login requires all of them.
    created_by / updated_by hold the username of the acting principal ("system" for
    registration and seeding).
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), nullable=False, unique=True, index=True)
    email = Column(String(100), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    role = Column(
        Enum(Role, name="user_role", native_enum=False, length=20),
        nullable=False,
        default=Role.USER,
    )

    enabled = Column(Boolean, nullable=False, default=True)
    account_non_expired = Column(Boolean, nullable=False, default=True)
    account_non_locked = Column(Boolean, nullable=False, default=True)
    credentials_non_expired = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    created_by = Column(String(50), nullable=False, default="system")
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
    updated_by = Column(String(50), nullable=False, default="system")

    refresh_tokens = relationship(
        "RefreshToken",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
