"""SQLAlchemy ORM models."""

from jobmonitor.models.base import Base
from jobmonitor.models.refresh_token import RefreshToken
from jobmonitor.models.user import Role, User

__all__ = ["Base", "RefreshToken", "Role", "User"]
