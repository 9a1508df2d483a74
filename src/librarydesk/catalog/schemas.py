"""Pydantic schemas for catalog items."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class BookBase(BaseModel):
    """Base book fields."""

    title: str = Field(..., min_length=1, max_length=500, description="Book title")
    author: str = Field(..., min_length=1, max_length=500, description="Primary author")
    isbn: str = Field(..., min_length=1, max_length=32, description="ISBN, unique per book")
    total_quantity: int = Field(..., gt=0, description="Copies owned by the library")
    shelf_location: str = Field(..., min_length=1, max_length=100)

    @field_validator("title", "author", "isbn", "shelf_location")
    @classmethod
    def strip_text(cls, v: str) -> str:
        """Reject values that are only whitespace."""
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class BookCreate(BookBase):
    """Schema for registering a book."""

    pass


class BookUpdate(BaseModel):
    """Schema for updating a book.

    Available quantity is not editable: it follows checkouts and returns,
    and is shifted automatically when the total changes.
    """

    title: Optional[str] = Field(None, min_length=1, max_length=500)
    author: Optional[str] = Field(None, min_length=1, max_length=500)
    isbn: Optional[str] = Field(None, min_length=1, max_length=32)
    total_quantity: Optional[int] = Field(None, gt=0)
    shelf_location: Optional[str] = Field(None, min_length=1, max_length=100)

    @field_validator("title", "author", "isbn", "shelf_location")
    @classmethod
    def strip_text(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class BookResponse(BaseModel):
    """Schema for book responses."""

    id: str
    title: str
    author: str
    isbn: str
    total_quantity: int
    available_quantity: int
    shelf_location: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
