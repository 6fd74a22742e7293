from .settings import settings, get_settings, Settings
from .database import Base, create_engine, create_sessionmaker, init_db
from .logging_config import configure_logging

__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "Base",
    "create_engine",
    "create_sessionmaker",
    "init_db",
    "configure_logging",
]
