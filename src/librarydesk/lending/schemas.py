"""Pydantic schemas for checkouts and returns."""

from datetime import datetime
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

from ..catalog.schemas import BookResponse
from ..patrons.schemas import BorrowerResponse


class CheckoutRequest(BaseModel):
    """Schema for checking a book out."""

    book_id: str = Field(..., min_length=1)
    borrower_id: str = Field(..., min_length=1)


class ByRecordId(BaseModel):
    """Return selector: the borrowing record itself."""

    kind: Literal["record"] = "record"
    record_id: str = Field(..., min_length=1)


class ByBookAndBorrower(BaseModel):
    """Return selector: the open loan of this book to this borrower."""

    kind: Literal["book_borrower"] = "book_borrower"
    book_id: str = Field(..., min_length=1)
    borrower_id: str = Field(..., min_length=1)


ReturnSelector = Union[ByRecordId, ByBookAndBorrower]


class ReturnRequest(BaseModel):
    """Request body for a return.

    Either ``record_id`` or both ``book_id`` and ``borrower_id``.
    """

    record_id: Optional[str] = Field(None, min_length=1)
    book_id: Optional[str] = Field(None, min_length=1)
    borrower_id: Optional[str] = Field(None, min_length=1)

    @model_validator(mode="after")
    def one_selector(self) -> "ReturnRequest":
        by_pair = self.book_id is not None or self.borrower_id is not None
        if self.record_id is not None and by_pair:
            raise ValueError("give either record_id or book_id and borrower_id, not both")
        if self.record_id is None and (self.book_id is None or self.borrower_id is None):
            raise ValueError("record_id, or both book_id and borrower_id, is required")
        return self

    def to_selector(self) -> ReturnSelector:
        """Convert to the tagged selector the lending manager expects."""
        if self.record_id is not None:
            return ByRecordId(record_id=self.record_id)
        return ByBookAndBorrower(book_id=self.book_id, borrower_id=self.borrower_id)


class BorrowingRecordResponse(BaseModel):
    """Schema for borrowing record responses."""

    id: str
    book_id: str
    borrower_id: str
    checkout_date: datetime
    due_date: datetime
    return_date: Optional[datetime]
    is_open: bool
    book: Optional[BookResponse] = None
    borrower: Optional[BorrowerResponse] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
