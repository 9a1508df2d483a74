"""Catalog manager for book registration and maintenance."""

from typing import Optional

from sqlalchemy import func, or_, select, update
from sqlalchemy.orm import Session

from ..db.database import Database, commit_or_conflict, get_db
from ..errors import ConflictError, InvalidRequestError, NotFoundError
from ..lending.models import BorrowingRecord
from .models import Book
from .schemas import BookCreate, BookUpdate


class CatalogManager:
    """Manages the book catalog."""

    def __init__(self, db: Optional[Database] = None):
        """Initialize catalog manager.

        Args:
            db: Database instance
        """
        self.db = db or get_db()

    def register(self, data: BookCreate) -> Book:
        """Register a new book.

        All copies start out available.

        Args:
            data: Book registration data

        Returns:
            Created book

        Raises:
            ConflictError: A book with the same ISBN already exists
        """
        with self.db.get_session() as session:
            if self._get_by_isbn(session, data.isbn):
                raise ConflictError(f"Book with ISBN {data.isbn} already exists")

            book = Book(
                title=data.title,
                author=data.author,
                isbn=data.isbn,
                total_quantity=data.total_quantity,
                available_quantity=data.total_quantity,
                shelf_location=data.shelf_location,
            )
            session.add(book)
            commit_or_conflict(session, f"Book with ISBN {data.isbn} already exists")
            session.refresh(book)
            session.expunge(book)
            return book

    def get(self, book_id: str) -> Book:
        """Get a book by ID.

        Raises:
            NotFoundError: No book with this ID
        """
        with self.db.get_session() as session:
            book = self._get_or_raise(session, book_id)
            session.expunge(book)
            return book

    def list_all(self) -> list[Book]:
        """List every book, newest first."""
        with self.db.get_session() as session:
            stmt = select(Book).order_by(Book.created_at.desc(), Book.id)
            books = list(session.execute(stmt).scalars().all())
            for book in books:
                session.expunge(book)
            return books

    def update(self, book_id: str, data: BookUpdate) -> Book:
        """Update a book.

        Changing the total quantity moves the available quantity by the
        same amount, so copies already on loan stay accounted for.

        Args:
            book_id: Book ID
            data: Fields to change

        Returns:
            Updated book

        Raises:
            NotFoundError: No book with this ID
            ConflictError: The new ISBN belongs to another book
            InvalidRequestError: New total is below the copies on loan
        """
        with self.db.get_session() as session:
            book = self._get_or_raise(session, book_id)

            update_data = {
                k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None
            }

            new_isbn = update_data.get("isbn")
            if new_isbn and new_isbn != book.isbn and self._get_by_isbn(session, new_isbn):
                raise ConflictError(f"Book with ISBN {new_isbn} already exists")

            if "total_quantity" in update_data:
                new_total = update_data.pop("total_quantity")
                # Shift availability against the stored counts, not the ones read above
                resized = session.execute(
                    update(Book)
                    .where(
                        Book.id == book_id,
                        Book.total_quantity - Book.available_quantity <= new_total,
                    )
                    .values(
                        total_quantity=new_total,
                        available_quantity=Book.available_quantity
                        + (new_total - Book.total_quantity),
                    )
                    .execution_options(synchronize_session=False)
                ).rowcount
                if resized != 1:
                    session.refresh(book)
                    raise InvalidRequestError(
                        f"Total quantity {new_total} is below the "
                        f"{book.copies_on_loan} copies on loan"
                    )

            for field, value in update_data.items():
                setattr(book, field, value)

            commit_or_conflict(session, f"Book with ISBN {new_isbn} already exists")
            session.refresh(book)
            session.expunge(book)
            return book

    def remove(self, book_id: str) -> None:
        """Delete a book and its closed borrowing history.

        Raises:
            NotFoundError: No book with this ID
            ConflictError: Copies of the book are still on loan
        """
        with self.db.get_session() as session:
            book = self._get_or_raise(session, book_id)

            open_loans = session.execute(
                select(func.count())
                .select_from(BorrowingRecord)
                .where(
                    BorrowingRecord.book_id == book_id,
                    BorrowingRecord.return_date.is_(None),
                )
            ).scalar() or 0
            if open_loans:
                raise ConflictError(
                    f"Book {book_id} is in use: {open_loans} active checkout(s)"
                )

            session.delete(book)
            session.commit()

    def search(self, query: str) -> list[Book]:
        """Search books by title, author or ISBN (case-insensitive substring).

        Args:
            query: Text to look for

        Returns:
            Matching books, newest first
        """
        with self.db.get_session() as session:
            stmt = (
                select(Book)
                .where(
                    or_(
                        Book.title.icontains(query, autoescape=True),
                        Book.author.icontains(query, autoescape=True),
                        Book.isbn.icontains(query, autoescape=True),
                    )
                )
                .order_by(Book.created_at.desc(), Book.id)
            )
            books = list(session.execute(stmt).scalars().all())
            for book in books:
                session.expunge(book)
            return books

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _get_by_isbn(session: Session, isbn: str) -> Optional[Book]:
        return session.execute(select(Book).where(Book.isbn == isbn)).scalar_one_or_none()

    @staticmethod
    def _get_or_raise(session: Session, book_id: str) -> Book:
        book = session.get(Book, book_id)
        if not book:
            raise NotFoundError(f"Book with ID {book_id} not found")
        return book
