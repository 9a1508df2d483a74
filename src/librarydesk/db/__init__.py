"""Database module: engine, session unit of work and declarative base."""

from .database import Database, commit_or_conflict, get_db, reset_db
from .models import Base, generate_uuid, utcnow

__all__ = [
    "Base",
    "Database",
    "commit_or_conflict",
    "generate_uuid",
    "get_db",
    "reset_db",
    "utcnow",
]
