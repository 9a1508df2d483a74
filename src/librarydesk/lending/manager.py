"""Lending manager: checkouts, returns and ledger queries.

Checkout and return each touch two tables (books and borrowing_records).
Both writes happen inside one session, so they commit or roll back
together, and both use guarded UPDATE statements so a concurrent request
cannot push a book's available quantity outside ``0..total_quantity`` or
close the same record twice.
"""

from datetime import datetime, timedelta
from typing import Callable, Optional

from sqlalchemy import Select, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from ..catalog.models import Book
from ..db.database import Database, get_db
from ..db.models import utcnow
from ..errors import InvalidRequestError, NotFoundError
from ..patrons.models import Borrower
from .models import BorrowingRecord
from .schemas import ByBookAndBorrower, ByRecordId, ReturnSelector

# Fixed lending policy
LOAN_PERIOD_DAYS = 14

Clock = Callable[[], datetime]


class LendingManager:
    """Manages book checkouts and returns."""

    def __init__(self, db: Optional[Database] = None, clock: Optional[Clock] = None):
        """Initialize lending manager.

        Args:
            db: Database instance
            clock: Returns the current naive UTC time (default: utcnow)
        """
        self.db = db or get_db()
        self.clock = clock or utcnow

    # -------------------------------------------------------------------------
    # Checkout / Return
    # -------------------------------------------------------------------------

    def checkout(self, book_id: str, borrower_id: str) -> BorrowingRecord:
        """Check a book out to a borrower.

        Args:
            book_id: Book ID
            borrower_id: Borrower ID

        Returns:
            The new open borrowing record, with book and borrower loaded

        Raises:
            NotFoundError: Book or borrower does not exist
            InvalidRequestError: No copy available, or the borrower already
                has this book checked out
        """
        with self.db.get_session() as session:
            book = session.get(Book, book_id)
            if not book:
                raise NotFoundError("Book not found")

            if book.available_quantity <= 0:
                raise InvalidRequestError("Book is not available for checkout")

            borrower = session.get(Borrower, borrower_id)
            if not borrower:
                raise NotFoundError("Borrower not found")

            selector = ByBookAndBorrower(book_id=book_id, borrower_id=borrower_id)
            if self._find_open_record(session, selector):
                raise InvalidRequestError("Borrower already has this book checked out")

            # Take a copy only if one is still there
            taken = session.execute(
                update(Book)
                .where(Book.id == book_id, Book.available_quantity > 0)
                .values(available_quantity=Book.available_quantity - 1)
            ).rowcount
            if taken != 1:
                raise InvalidRequestError("Book is not available for checkout")

            now = self.clock()
            record = BorrowingRecord(
                book_id=book_id,
                borrower_id=borrower_id,
                checkout_date=now,
                due_date=now + timedelta(days=LOAN_PERIOD_DAYS),
                return_date=None,
            )
            session.add(record)
            try:
                session.flush()
            except IntegrityError as e:
                # Open-pair unique index: a concurrent checkout got there first
                raise InvalidRequestError("Borrower already has this book checked out") from e

            record_id = record.id
            session.commit()
            return self._load_detached(session, record_id)

    def return_book(self, selector: ReturnSelector) -> BorrowingRecord:
        """Close an open borrowing record and put the copy back.

        Args:
            selector: ByRecordId or ByBookAndBorrower

        Returns:
            The closed borrowing record, with book and borrower loaded

        Raises:
            NotFoundError: No open record matches the selector
        """
        with self.db.get_session() as session:
            record = self._find_open_record(session, selector)
            if not record:
                raise NotFoundError("No active checkout found")

            record_id = record.id
            book_id = record.book_id
            now = self.clock()

            closed = session.execute(
                update(BorrowingRecord)
                .where(BorrowingRecord.id == record_id, BorrowingRecord.return_date.is_(None))
                .values(return_date=now)
            ).rowcount
            if closed != 1:
                raise NotFoundError("No active checkout found")

            session.execute(
                update(Book)
                .where(Book.id == book_id, Book.available_quantity < Book.total_quantity)
                .values(available_quantity=Book.available_quantity + 1)
            )

            session.commit()
            return self._load_detached(session, record_id)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_record(self, record_id: str) -> BorrowingRecord:
        """Get a borrowing record by ID.

        Raises:
            NotFoundError: No record with this ID
        """
        with self.db.get_session() as session:
            record = session.execute(
                self._with_relations(select(BorrowingRecord)).where(
                    BorrowingRecord.id == record_id
                )
            ).scalar_one_or_none()
            if not record:
                raise NotFoundError(f"Borrowing record with ID {record_id} not found")
            session.expunge_all()
            return record

    def current_books_for_borrower(self, borrower_id: str) -> list[BorrowingRecord]:
        """List the open loans of a borrower, newest checkout first.

        Raises:
            NotFoundError: Borrower does not exist
        """
        with self.db.get_session() as session:
            if not session.get(Borrower, borrower_id):
                raise NotFoundError("Borrower not found")

            stmt = (
                self._with_relations(select(BorrowingRecord))
                .where(
                    BorrowingRecord.borrower_id == borrower_id,
                    BorrowingRecord.return_date.is_(None),
                )
                .order_by(BorrowingRecord.checkout_date.desc())
            )
            return self._fetch_detached(session, stmt)

    def overdue_books(self) -> list[BorrowingRecord]:
        """List open loans past their due date, most overdue first."""
        with self.db.get_session() as session:
            stmt = (
                self._with_relations(select(BorrowingRecord))
                .where(
                    BorrowingRecord.return_date.is_(None),
                    BorrowingRecord.due_date < self.clock(),
                )
                .order_by(BorrowingRecord.due_date.asc())
            )
            return self._fetch_detached(session, stmt)

    def all_records(self) -> list[BorrowingRecord]:
        """List every borrowing record, newest first."""
        with self.db.get_session() as session:
            stmt = self._with_relations(select(BorrowingRecord)).order_by(
                BorrowingRecord.created_at.desc()
            )
            return self._fetch_detached(session, stmt)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _find_open_record(
        session: Session, selector: ReturnSelector
    ) -> Optional[BorrowingRecord]:
        """Find the open record a selector points at."""
        stmt = select(BorrowingRecord).where(BorrowingRecord.return_date.is_(None))

        if isinstance(selector, ByRecordId):
            stmt = stmt.where(BorrowingRecord.id == selector.record_id)
        elif isinstance(selector, ByBookAndBorrower):
            stmt = stmt.where(
                BorrowingRecord.book_id == selector.book_id,
                BorrowingRecord.borrower_id == selector.borrower_id,
            )
        else:
            raise TypeError(f"Unsupported return selector: {selector!r}")

        return session.execute(stmt).scalar_one_or_none()

    @staticmethod
    def _with_relations(stmt: Select) -> Select:
        return stmt.options(
            selectinload(BorrowingRecord.book),
            selectinload(BorrowingRecord.borrower),
        )

    def _load_detached(self, session: Session, record_id: str) -> BorrowingRecord:
        record = session.execute(
            self._with_relations(select(BorrowingRecord)).where(BorrowingRecord.id == record_id)
        ).scalar_one()
        session.expunge_all()
        return record

    @staticmethod
    def _fetch_detached(session: Session, stmt: Select) -> list[BorrowingRecord]:
        records = list(session.execute(stmt).scalars().all())
        session.expunge_all()
        return records
