"""Patron manager for borrower registration and maintenance."""

from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from ..db.database import Database, commit_or_conflict, get_db
from ..errors import ConflictError, NotFoundError
from ..lending.models import BorrowingRecord
from .models import Borrower
from .schemas import BorrowerCreate, BorrowerUpdate


class PatronManager:
    """Manages library borrowers."""

    def __init__(self, db: Optional[Database] = None):
        """Initialize patron manager.

        Args:
            db: Database instance
        """
        self.db = db or get_db()

    def register(self, data: BorrowerCreate) -> Borrower:
        """Register a new borrower.

        Raises:
            ConflictError: The email is already registered
        """
        with self.db.get_session() as session:
            if self._get_by_email(session, data.email):
                raise ConflictError(f"Borrower with email {data.email} already exists")

            borrower = Borrower(name=data.name, email=data.email)
            session.add(borrower)
            commit_or_conflict(session, f"Borrower with email {data.email} already exists")
            session.refresh(borrower)
            session.expunge(borrower)
            return borrower

    def get(self, borrower_id: str) -> Borrower:
        """Get a borrower by ID.

        Raises:
            NotFoundError: No borrower with this ID
        """
        with self.db.get_session() as session:
            borrower = self._get_or_raise(session, borrower_id)
            session.expunge(borrower)
            return borrower

    def list_all(self) -> list[Borrower]:
        """List every borrower, newest first."""
        with self.db.get_session() as session:
            stmt = select(Borrower).order_by(Borrower.created_at.desc(), Borrower.id)
            borrowers = list(session.execute(stmt).scalars().all())
            for b in borrowers:
                session.expunge(b)
            return borrowers

    def update(self, borrower_id: str, data: BorrowerUpdate) -> Borrower:
        """Update a borrower's profile.

        Raises:
            NotFoundError: No borrower with this ID
            ConflictError: The new email belongs to another borrower
        """
        with self.db.get_session() as session:
            borrower = self._get_or_raise(session, borrower_id)

            update_data = {
                k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None
            }

            new_email = update_data.get("email")
            if new_email and new_email != borrower.email and self._get_by_email(session, new_email):
                raise ConflictError(f"Borrower with email {new_email} already exists")

            for field, value in update_data.items():
                setattr(borrower, field, value)

            commit_or_conflict(session, f"Borrower with email {new_email} already exists")
            session.refresh(borrower)
            session.expunge(borrower)
            return borrower

    def remove(self, borrower_id: str) -> None:
        """Delete a borrower and their closed borrowing history.

        Raises:
            NotFoundError: No borrower with this ID
            ConflictError: The borrower still has books checked out
        """
        with self.db.get_session() as session:
            borrower = self._get_or_raise(session, borrower_id)

            open_loans = session.execute(
                select(func.count())
                .select_from(BorrowingRecord)
                .where(
                    BorrowingRecord.borrower_id == borrower_id,
                    BorrowingRecord.return_date.is_(None),
                )
            ).scalar() or 0
            if open_loans:
                raise ConflictError(
                    f"Borrower {borrower_id} is in use: {open_loans} active checkout(s)"
                )

            session.delete(borrower)
            session.commit()

    def search(self, query: str) -> list[Borrower]:
        """Search borrowers by name or email (case-insensitive substring)."""
        with self.db.get_session() as session:
            stmt = (
                select(Borrower)
                .where(
                    or_(
                        Borrower.name.icontains(query, autoescape=True),
                        Borrower.email.icontains(query, autoescape=True),
                    )
                )
                .order_by(Borrower.created_at.desc(), Borrower.id)
            )
            borrowers = list(session.execute(stmt).scalars().all())
            for b in borrowers:
                session.expunge(b)
            return borrowers

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _get_by_email(session: Session, email: str) -> Optional[Borrower]:
        return session.execute(
            select(Borrower).where(Borrower.email == email)
        ).scalar_one_or_none()

    @staticmethod
    def _get_or_raise(session: Session, borrower_id: str) -> Borrower:
        borrower = session.get(Borrower, borrower_id)
        if not borrower:
            raise NotFoundError(f"Borrower with ID {borrower_id} not found")
        return borrower
