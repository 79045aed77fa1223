"""Core application components: settings, database engine, logging."""

from .config import Settings, settings
from .database import AsyncSessionLocal, drop_db, engine, get_db, init_db
from .logging import get_logger, setup_logging

__all__ = [
    "settings",
    "Settings",
    "engine",
    "AsyncSessionLocal",
    "get_db",
    "init_db",
    "drop_db",
    "get_logger",
    "setup_logging",
]
