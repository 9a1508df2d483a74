"""SQLAlchemy model for library patrons.

Tables:
- borrowers: people who can check books out
"""

from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Date, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..db.models import Base, generate_uuid, utcnow

if TYPE_CHECKING:
    from ..lending.models import BorrowingRecord


class Borrower(Base):
    """Borrower model - a registered library patron."""

    __tablename__ = "borrowers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    registered_date: Mapped[date] = mapped_column(
        Date, nullable=False, default=lambda: utcnow().date()
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    # Closed history goes with the borrower; open loans block deletion in PatronManager
    borrowing_records: Mapped[list["BorrowingRecord"]] = relationship(
        "BorrowingRecord", back_populates="borrower", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Borrower(id={self.id}, name='{self.name}', email='{self.email}')>"
