"""
Studizen Backend - Core Module

Configuration, database setup, security, errors and localization.
"""

from studizen.core.config import get_settings, settings
from studizen.core.database import Base, get_db, get_engine
from studizen.core.exceptions import StudizenError

__all__ = ["settings", "get_settings", "Base", "get_db", "get_engine", "StudizenError"]
