"""CSV and XLSX rendering of report rows."""

import csv
from datetime import datetime
from io import BytesIO, StringIO
from typing import Optional, Union

from openpyxl import Workbook
from openpyxl.styles import Font

from .schemas import ReportRow

COLUMNS = [
    "Borrowing ID",
    "Book Title",
    "Book Author",
    "Book ISBN",
    "Borrower Name",
    "Borrower Email",
    "Checkout Date",
    "Due Date",
    "Return Date",
    "Status",
    "Days Overdue",
]

NOT_RETURNED = "Not Returned"
MISSING = "N/A"
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

Cell = Union[str, int, datetime]


def row_values(row: ReportRow) -> list[Cell]:
    """Cell values of a row, in COLUMNS order."""
    return [
        row.record_id,
        row.book_title or MISSING,
        row.book_author or MISSING,
        row.book_isbn or MISSING,
        row.borrower_name or MISSING,
        row.borrower_email or MISSING,
        row.checkout_date,
        row.due_date,
        row.return_date or NOT_RETURNED,
        row.status,
        row.days_overdue,
    ]


def _text(value: Cell) -> str:
    if isinstance(value, datetime):
        return value.strftime(DATETIME_FORMAT)
    return str(value)


def to_csv(rows: list[ReportRow]) -> str:
    """Render rows as CSV text. The header is written even for no rows."""
    output = StringIO()
    writer = csv.DictWriter(output, fieldnames=COLUMNS)
    writer.writeheader()
    for row in rows:
        writer.writerow(dict(zip(COLUMNS, (_text(v) for v in row_values(row)))))
    return output.getvalue()


def to_xlsx(rows: list[ReportRow], sheet_title: Optional[str] = None) -> bytes:
    """Render rows as an XLSX workbook with a single sheet."""
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = sheet_title or "Report"

    sheet.append(COLUMNS)
    for cell in sheet[1]:
        cell.font = Font(bold=True)

    for row in rows:
        sheet.append(row_values(row))

    for column_cells in sheet.columns:
        width = max(len(_text(c.value)) for c in column_cells if c.value is not None)
        sheet.column_dimensions[column_cells[0].column_letter].width = min(width + 2, 50)

    for row_cells in sheet.iter_rows(min_row=2):
        for cell in row_cells:
            if isinstance(cell.value, datetime):
                cell.number_format = "yyyy-mm-dd hh:mm:ss"

    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()
