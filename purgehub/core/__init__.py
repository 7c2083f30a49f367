"""Core app configuration and database."""

from purgehub.core.config import get_settings, settings
from purgehub.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
