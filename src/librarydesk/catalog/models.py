"""SQLAlchemy model for catalog items.

Tables:
- books: one row per title, with total and available copy counts
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..db.models import Base, generate_uuid, utcnow

if TYPE_CHECKING:
    from ..lending.models import BorrowingRecord


class Book(Base):
    """Book model - a catalog entry and its copy counts."""

    __tablename__ = "books"
    __table_args__ = (
        CheckConstraint("total_quantity > 0", name="ck_books_total_positive"),
        CheckConstraint(
            "available_quantity >= 0 AND available_quantity <= total_quantity",
            name="ck_books_available_in_range",
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)

    title: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    author: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    isbn: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)

    # Copies
    total_quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    available_quantity: Mapped[int] = mapped_column(Integer, nullable=False)

    shelf_location: Mapped[str] = mapped_column(String(100), nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    # Closed history goes with the book; open loans block deletion in CatalogManager
    borrowing_records: Mapped[list["BorrowingRecord"]] = relationship(
        "BorrowingRecord", back_populates="book", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Book(id={self.id}, title='{self.title}', isbn='{self.isbn}')>"

    @property
    def copies_on_loan(self) -> int:
        """Number of copies currently lent out."""
        return self.total_quantity - self.available_quantity
