"""Database package."""

from parkbook.db.base import Base
from parkbook.db.session import async_session_maker, engine, get_session_factory

__all__ = ["Base", "async_session_maker", "engine", "get_session_factory"]
