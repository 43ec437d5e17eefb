"""Core package - configuration and database utilities."""

from .config import Settings, settings, get_settings
from .database import Database

__all__ = [
    "Settings",
    "settings",
    "get_settings",
    "Database",
]
