"""Database package."""

from .base import Base
from .models import MediaItem, PolicySetting
from .session import (
    SessionFactory,
    build_engine,
    build_session_factory,
    get_database_url,
    session_scope,
)

__all__ = [
    "Base",
    "MediaItem",
    "PolicySetting",
    "SessionFactory",
    "build_engine",
    "build_session_factory",
    "get_database_url",
    "session_scope",
]
