"""Shared SQLAlchemy declarative base and column helpers.

Tables (registered by their own packages):
- books: catalog items (catalog.models)
- borrowers: registered patrons (patrons.models)
- borrowing_records: the lending ledger (lending.models)
- users: librarian credentials (auth.models)
"""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


def generate_uuid() -> str:
    """Generate a UUID string for primary keys."""
    return str(uuid4())


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, the form stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
