"""Tests for ReportManager and the report period."""

from datetime import date, datetime

import pytest

from librarydesk.lending.schemas import ByRecordId
from librarydesk.reports import ExportFormat, ReportKind, ReportPeriod


class TestReportPeriod:
    """Tests for the previous-calendar-month window."""

    def test_mid_month(self):
        period = ReportPeriod.last_calendar_month(date(2025, 3, 15))

        assert period.start == datetime(2025, 2, 1)
        assert period.end == datetime(2025, 3, 1)

    def test_january_rolls_back_a_year(self):
        period = ReportPeriod.last_calendar_month(date(2025, 1, 3))

        assert period.start == datetime(2024, 12, 1)
        assert period.end == datetime(2025, 1, 1)

    def test_first_day_of_month(self):
        period = ReportPeriod.last_calendar_month(date(2024, 3, 1))

        assert period.start == datetime(2024, 2, 1)
        assert period.end == datetime(2024, 3, 1)

    def test_contains_is_half_open(self):
        period = ReportPeriod.last_calendar_month(date(2025, 3, 15))

        assert period.contains(datetime(2025, 2, 1))
        assert period.contains(datetime(2025, 2, 28, 23, 59, 59))
        assert not period.contains(datetime(2025, 3, 1))
        assert not period.contains(datetime(2025, 1, 31, 23, 59, 59))


@pytest.fixture
def ledger(lending, book, single_copy_book, borrower, other_borrower, clock):
    """Loans spread around February 2025, read back on 2025-03-15.

    - january: checked out Jan 25, still open (overdue, outside the period)
    - feb_open: checked out Feb 10, still open (overdue, in the period)
    - feb_late: checked out Feb 20, still open (overdue, in the period)
    - feb_returned: checked out Feb 12, returned Feb 20
    - march: checked out Mar 2, still open
    """
    now = clock()
    records = {}

    clock.set(datetime(2025, 1, 25, 9, 0))
    records["january"] = lending.checkout(book.id, borrower.id)

    clock.set(datetime(2025, 2, 10, 9, 0))
    records["feb_open"] = lending.checkout(book.id, other_borrower.id)

    clock.set(datetime(2025, 2, 12, 9, 0))
    records["feb_returned"] = lending.checkout(single_copy_book.id, borrower.id)
    clock.set(datetime(2025, 2, 20, 8, 0))
    lending.return_book(ByRecordId(record_id=records["feb_returned"].id))

    clock.set(datetime(2025, 2, 20, 9, 0))
    records["feb_late"] = lending.checkout(single_copy_book.id, other_borrower.id)

    clock.set(datetime(2025, 3, 2, 9, 0))
    lending.return_book(ByRecordId(record_id=records["january"].id))
    records["march"] = lending.checkout(book.id, borrower.id)

    clock.set(now)
    return records


class TestOverdueLastMonth:
    """Tests for the overdue report."""

    def test_only_open_overdue_loans_from_last_month(self, reports, ledger):
        records = reports.overdue_last_month()

        assert [r.id for r in records] == [ledger["feb_open"].id, ledger["feb_late"].id]

    def test_loaded_with_relations(self, reports, ledger):
        record = reports.overdue_last_month()[0]

        assert record.book.title
        assert record.borrower.email

    def test_empty_ledger(self, reports):
        assert reports.overdue_last_month() == []


class TestBorrowingLastMonth:
    """Tests for the borrowing activity report."""

    def test_all_checkouts_from_last_month(self, reports, ledger):
        records = reports.borrowing_last_month()

        assert [r.id for r in records] == [
            ledger["feb_late"].id,
            ledger["feb_returned"].id,
            ledger["feb_open"].id,
        ]

    def test_records_for_kind(self, reports, ledger):
        assert len(reports.records_for(ReportKind.BORROWING_LAST_MONTH)) == 3
        assert len(reports.records_for(ReportKind.OVERDUE_LAST_MONTH)) == 2


class TestBuildRows:
    """Tests for flattening records into report rows."""

    def test_open_row(self, reports, ledger, book, borrower, other_borrower):
        rows = reports.build_rows(reports.overdue_last_month())
        row = rows[0]

        assert row.record_id == ledger["feb_open"].id
        assert row.book_title == book.title
        assert row.book_isbn == book.isbn
        assert row.borrower_name == other_borrower.name
        assert row.return_date is None
        assert row.status == "Active"
        # Due Feb 24 09:00, read at Mar 15 10:00
        assert row.days_overdue == 19

    def test_returned_row(self, reports, ledger):
        rows = {r.record_id: r for r in reports.build_rows(reports.borrowing_last_month())}
        row = rows[ledger["feb_returned"].id]

        assert row.status == "Returned"
        assert row.return_date == datetime(2025, 2, 20, 8, 0)
        assert row.days_overdue == 0

    def test_not_yet_due_row(self, reports, ledger):
        march = reports.build_rows([ledger["march"]])[0]
        assert march.days_overdue == 0

    def test_explicit_now(self, reports, ledger):
        rows = reports.build_rows(reports.overdue_last_month(), now=datetime(2025, 2, 25, 9, 0))
        assert rows[0].days_overdue == 1


class TestExport:
    """Tests for rendering report files."""

    def test_csv_export(self, reports, ledger):
        result = reports.export(ReportKind.OVERDUE_LAST_MONTH, ExportFormat.CSV)

        assert result.filename == "overdue-last-month-2025-03-15.csv"
        assert result.content_type.startswith("text/csv")
        assert result.row_count == 2
        lines = result.content.decode("utf-8").strip().splitlines()
        assert lines[0].startswith("Borrowing ID,Book Title")
        assert len(lines) == 3

    def test_xlsx_export_is_default(self, reports, ledger):
        result = reports.export(ReportKind.BORROWING_LAST_MONTH)

        assert result.format is ExportFormat.XLSX
        assert result.filename == "borrowing-last-month-2025-03-15.xlsx"
        assert result.content[:2] == b"PK"
        assert result.row_count == 3

    def test_empty_export_still_has_header(self, reports):
        result = reports.export(ReportKind.OVERDUE_LAST_MONTH, ExportFormat.CSV)

        assert result.row_count == 0
        assert result.content.decode("utf-8").strip().startswith("Borrowing ID")
