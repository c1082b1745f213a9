"""Core app configuration, database, and security primitives."""

from jobmonitor.core.config import get_settings, settings
from jobmonitor.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
