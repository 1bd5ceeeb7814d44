"""Database package"""

from infraworks.db.session import AsyncSessionLocal, engine, get_db, session_scope
from infraworks.models.base import Base

__all__ = ["Base", "AsyncSessionLocal", "engine", "get_db", "session_scope"]
