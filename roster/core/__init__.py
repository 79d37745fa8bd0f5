"""Core app configuration, database and session tokens."""

from roster.core.config import get_settings, settings
from roster.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
