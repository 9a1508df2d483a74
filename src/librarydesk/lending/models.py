"""SQLAlchemy model for the lending ledger.

Tables:
- borrowing_records: one row per checkout, closed by setting return_date
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..db.models import Base, generate_uuid, utcnow

if TYPE_CHECKING:
    from ..catalog.models import Book
    from ..patrons.models import Borrower


class BorrowingRecord(Base):
    """Borrowing record - links one book to one borrower for one loan."""

    __tablename__ = "borrowing_records"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)

    book_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("books.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    borrower_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("borrowers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Dates
    checkout_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    due_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    return_date: Mapped[Optional[datetime]] = mapped_column(DateTime)  # NULL while open

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    book: Mapped["Book"] = relationship("Book", back_populates="borrowing_records")
    borrower: Mapped["Borrower"] = relationship("Borrower", back_populates="borrowing_records")

    __table_args__ = (
        # At most one open record per (book, borrower) pair
        Index(
            "uq_borrowing_records_open_pair",
            "book_id",
            "borrower_id",
            unique=True,
            sqlite_where=text("return_date IS NULL"),
            postgresql_where=text("return_date IS NULL"),
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<BorrowingRecord(id={self.id}, book_id={self.book_id}, "
            f"borrower_id={self.borrower_id}, open={self.is_open})>"
        )

    @property
    def is_open(self) -> bool:
        """Check if the book is still out."""
        return self.return_date is None

    def is_overdue(self, now: datetime) -> bool:
        """Check if the loan is open and past its due date."""
        return self.is_open and self.due_date < now

    def days_overdue(self, now: datetime) -> int:
        """Whole days past the due date (0 if returned or not yet due)."""
        if not self.is_overdue(now):
            return 0
        return (now - self.due_date).days
