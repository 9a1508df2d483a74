"""Auth manager: user registration and credential checks."""

from typing import Optional

import bcrypt
from sqlalchemy import or_, select

from ..db.database import Database, commit_or_conflict, get_db
from ..errors import ConflictError, NotFoundError, UnauthorizedError
from .models import User
from .schemas import RegisterRequest


def hash_password(password: str) -> str:
    """Hash a password with a fresh bcrypt salt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored bcrypt hash."""
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


class AuthManager:
    """Manages API users."""

    def __init__(self, db: Optional[Database] = None):
        """Initialize auth manager.

        Args:
            db: Database instance
        """
        self.db = db or get_db()

    def register(self, data: RegisterRequest) -> User:
        """Register a new user.

        Args:
            data: Registration data

        Returns:
            Created user

        Raises:
            ConflictError: Username or email is already taken
        """
        with self.db.get_session() as session:
            existing = session.execute(
                select(User).where(
                    or_(User.username == data.username, User.email == data.email)
                )
            ).scalars().first()
            if existing:
                raise ConflictError("Username or email already registered")

            user = User(
                username=data.username,
                email=data.email,
                password_hash=hash_password(data.password),
                role=data.role,
            )
            session.add(user)
            commit_or_conflict(session, "Username or email already registered")
            session.refresh(user)
            session.expunge(user)
            return user

    def authenticate(self, username: str, password: str) -> User:
        """Check a username and password.

        Raises:
            UnauthorizedError: Unknown user or wrong password
        """
        with self.db.get_session() as session:
            user = session.execute(
                select(User).where(User.username == username)
            ).scalar_one_or_none()
            if not user or not check_password(password, user.password_hash):
                raise UnauthorizedError("Invalid username or password")
            session.expunge(user)
            return user

    def get(self, user_id: str) -> User:
        """Get a user by ID.

        Raises:
            NotFoundError: No user with this ID
        """
        with self.db.get_session() as session:
            user = session.get(User, user_id)
            if not user:
                raise NotFoundError(f"User with ID {user_id} not found")
            session.expunge(user)
            return user
