"""Manager for read-only ledger reports."""

from datetime import datetime
from typing import Callable, Optional

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from ..db.database import Database, get_db
from ..db.models import utcnow
from ..lending.models import BorrowingRecord
from .export import to_csv, to_xlsx
from .schemas import ExportFormat, ReportExport, ReportKind, ReportPeriod, ReportRow


class ReportManager:
    """Manager for generating lending reports and their file exports."""

    def __init__(self, db: Optional[Database] = None, clock: Optional[Callable[[], datetime]] = None):
        """Initialize the report manager.

        Args:
            db: Database instance
            clock: Returns the current naive UTC time (default: utcnow)
        """
        self.db = db or get_db()
        self.clock = clock or utcnow

    def reporting_period(self) -> ReportPeriod:
        """The previous calendar month relative to the clock."""
        return ReportPeriod.last_calendar_month(self.clock().date())

    # ========================================================================
    # Queries
    # ========================================================================

    def overdue_last_month(self) -> list[BorrowingRecord]:
        """Open loans checked out last month that are now past due.

        Returns:
            Records ordered by due date, most overdue first
        """
        period = self.reporting_period()
        with self.db.get_session() as session:
            stmt = (
                select(BorrowingRecord)
                .options(
                    selectinload(BorrowingRecord.book),
                    selectinload(BorrowingRecord.borrower),
                )
                .where(
                    BorrowingRecord.return_date.is_(None),
                    BorrowingRecord.due_date < self.clock(),
                    BorrowingRecord.checkout_date >= period.start,
                    BorrowingRecord.checkout_date < period.end,
                )
                .order_by(BorrowingRecord.due_date.asc())
            )
            records = list(session.execute(stmt).scalars().all())
            session.expunge_all()
            return records

    def borrowing_last_month(self) -> list[BorrowingRecord]:
        """Every checkout made last month, returned or not.

        Returns:
            Records ordered by checkout date, newest first
        """
        period = self.reporting_period()
        with self.db.get_session() as session:
            stmt = (
                select(BorrowingRecord)
                .options(
                    selectinload(BorrowingRecord.book),
                    selectinload(BorrowingRecord.borrower),
                )
                .where(
                    BorrowingRecord.checkout_date >= period.start,
                    BorrowingRecord.checkout_date < period.end,
                )
                .order_by(BorrowingRecord.checkout_date.desc())
            )
            records = list(session.execute(stmt).scalars().all())
            session.expunge_all()
            return records

    def records_for(self, kind: ReportKind) -> list[BorrowingRecord]:
        """Run the query behind a report kind."""
        if kind is ReportKind.OVERDUE_LAST_MONTH:
            return self.overdue_last_month()
        return self.borrowing_last_month()

    # ========================================================================
    # Export
    # ========================================================================

    def build_rows(
        self, records: list[BorrowingRecord], now: Optional[datetime] = None
    ) -> list[ReportRow]:
        """Flatten records into report rows, computing days overdue as of ``now``."""
        now = now or self.clock()
        rows = []
        for record in records:
            book = record.book
            borrower = record.borrower
            rows.append(
                ReportRow(
                    record_id=record.id,
                    book_title=book.title if book else "",
                    book_author=book.author if book else "",
                    book_isbn=book.isbn if book else "",
                    borrower_name=borrower.name if borrower else "",
                    borrower_email=borrower.email if borrower else "",
                    checkout_date=record.checkout_date,
                    due_date=record.due_date,
                    return_date=record.return_date,
                    days_overdue=record.days_overdue(now),
                )
            )
        return rows

    def export(self, kind: ReportKind, fmt: ExportFormat = ExportFormat.XLSX) -> ReportExport:
        """Render a report as a downloadable file.

        Args:
            kind: Which report to run
            fmt: CSV or XLSX

        Returns:
            ReportExport with file name, bytes and row count
        """
        rows = self.build_rows(self.records_for(kind))

        if fmt is ExportFormat.CSV:
            content = to_csv(rows).encode("utf-8")
        else:
            content = to_xlsx(rows)

        filename = f"{kind.value}-{self.clock().date().isoformat()}.{fmt.value}"
        return ReportExport(
            kind=kind,
            format=fmt,
            filename=filename,
            content=content,
            row_count=len(rows),
        )
