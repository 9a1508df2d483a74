"""Schemas for lending reports and their exports."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Optional


class ReportKind(str, Enum):
    """Available ledger reports."""

    OVERDUE_LAST_MONTH = "overdue-last-month"
    BORROWING_LAST_MONTH = "borrowing-last-month"


class ExportFormat(str, Enum):
    """Export file formats."""

    CSV = "csv"
    XLSX = "xlsx"

    @property
    def content_type(self) -> str:
        if self is ExportFormat.CSV:
            return "text/csv; charset=utf-8"
        return "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@dataclass(frozen=True)
class ReportPeriod:
    """A half-open time window ``[start, end)``."""

    start: datetime
    end: datetime

    @classmethod
    def last_calendar_month(cls, today: date) -> "ReportPeriod":
        """The month before the one containing ``today``, first to last day."""
        first_of_this_month = today.replace(day=1)
        first_of_last_month = (first_of_this_month - timedelta(days=1)).replace(day=1)
        return cls(
            start=datetime.combine(first_of_last_month, datetime.min.time()),
            end=datetime.combine(first_of_this_month, datetime.min.time()),
        )

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.end


@dataclass
class ReportRow:
    """One exported line of a ledger report."""

    record_id: str
    book_title: str
    book_author: str
    book_isbn: str
    borrower_name: str
    borrower_email: str
    checkout_date: datetime
    due_date: datetime
    return_date: Optional[datetime]
    days_overdue: int = 0

    @property
    def status(self) -> str:
        return "Returned" if self.return_date else "Active"


@dataclass
class ReportExport:
    """A rendered report file."""

    kind: ReportKind
    format: ExportFormat
    filename: str
    content: bytes
    row_count: int

    @property
    def content_type(self) -> str:
        return self.format.content_type
