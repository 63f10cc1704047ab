"""Core app configuration, database and security."""

from userservice.core.config import get_settings, settings
from userservice.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
