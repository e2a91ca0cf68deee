# src/sheworks/db/__init__.py
"""Database engine, sessions and clock helpers."""

from .session import Base, SessionLocal, create_tables, get_db, session_scope
from .time import utc_timestamp, utcnow

__all__ = [
    "Base",
    "SessionLocal",
    "create_tables",
    "get_db",
    "session_scope",
    "utc_timestamp",
    "utcnow",
]
