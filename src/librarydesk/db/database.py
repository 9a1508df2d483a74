"""Database connection and session management.

Every manager works through `Database.get_session()`, which is one unit of
work: it commits when the block exits cleanly and rolls back everything
written inside it when an exception escapes.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..errors import ConflictError
from .models import Base


class Database:
    """Database connection and session manager."""

    def __init__(self, url: Optional[str] = None):
        """Initialize database connection.

        Args:
            url: SQLAlchemy database URL, a plain SQLite file path, or
                 ":memory:". If None, uses the configured database URL.
        """
        if url is None:
            from ..config import get_config

            url = get_config().database_url

        self._is_memory = url in (":memory:", "sqlite://", "sqlite:///:memory:")
        if self._is_memory:
            url = "sqlite://"
        elif "://" not in url:
            url = f"sqlite:///{Path(url).expanduser()}"

        self.url = make_url(url)
        self.is_sqlite = self.url.get_backend_name() == "sqlite"

        if self.is_sqlite and not self._is_memory:
            self._ensure_directory()

        # For in-memory databases, use StaticPool to reuse the same connection
        # so every session sees the same database
        if self._is_memory:
            self.engine = create_engine(
                "sqlite://",
                echo=False,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        elif self.is_sqlite:
            self.engine = create_engine(
                self.url,
                echo=False,
                connect_args={"check_same_thread": False},
            )
        else:
            self.engine = create_engine(self.url, echo=False, pool_pre_ping=True)

        if self.is_sqlite:
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

        self.SessionLocal = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)
        _register_models()

    def _ensure_directory(self) -> None:
        """Ensure the database directory exists."""
        if self.url.database:
            Path(self.url.database).expanduser().parent.mkdir(parents=True, exist_ok=True)

    def create_tables(self) -> None:
        """Create all database tables."""
        Base.metadata.create_all(self.engine)

    def drop_tables(self) -> None:
        """Drop all database tables. Use with caution!"""
        Base.metadata.drop_all(self.engine)

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Get a database session context manager."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


def commit_or_conflict(session: Session, message: str) -> None:
    """Commit, translating a constraint violation raised by the store into ConflictError."""
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        raise ConflictError(message) from e


def _register_models() -> None:
    """Import every model module so relationships resolve and tables are known."""
    from ..auth.models import User  # noqa: F401
    from ..catalog.models import Book  # noqa: F401
    from ..lending.models import BorrowingRecord  # noqa: F401
    from ..patrons.models import Borrower  # noqa: F401


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    """SQLite leaves foreign key enforcement off unless asked per connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# Global database instance
_db: Optional[Database] = None


def get_db(url: Optional[str] = None) -> Database:
    """Get or create the global database instance."""
    global _db
    if _db is None:
        _db = Database(url)
        _db.create_tables()
    return _db


def reset_db() -> None:
    """Reset the global database instance. Used for testing."""
    global _db
    if _db is not None:
        _db.engine.dispose()
    _db = None
