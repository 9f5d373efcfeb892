"""Database package for LoreChat Engine."""

from .database import Base, configure_database, get_db, init_db

__all__ = ["Base", "configure_database", "get_db", "init_db"]
