"""Pydantic schemas for library patrons."""

from datetime import date, datetime
from typing import Annotated, Any, Optional

from pydantic import AfterValidator, BaseModel, BeforeValidator, EmailStr, Field, field_validator

EMAIL_MAX_LENGTH = 200


def _strip(v: Any) -> Any:
    return v.strip() if isinstance(v, str) else v


def _normalize_email(v: str) -> str:
    if len(v) > EMAIL_MAX_LENGTH:
        raise ValueError(f"must be at most {EMAIL_MAX_LENGTH} characters")
    return v.lower()


# Email addresses are stored lower-cased so uniqueness is case-insensitive
Email = Annotated[EmailStr, BeforeValidator(_strip), AfterValidator(_normalize_email)]


class BorrowerBase(BaseModel):
    """Base borrower fields."""

    name: str = Field(..., min_length=1, max_length=200)
    email: Email

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class BorrowerCreate(BorrowerBase):
    """Schema for registering a borrower."""

    pass


class BorrowerUpdate(BaseModel):
    """Schema for updating a borrower."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[Email] = None


class BorrowerResponse(BaseModel):
    """Schema for borrower responses."""

    id: str
    name: str
    email: str
    registered_date: date
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
