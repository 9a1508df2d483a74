"""Lending reports module.

Provides functionality for:
- Overdue loans checked out in the previous calendar month
- All borrowing activity in the previous calendar month
- CSV and XLSX exports of either report
"""

from .schemas import ExportFormat, ReportExport, ReportKind, ReportPeriod, ReportRow
from .export import COLUMNS, to_csv, to_xlsx
from .manager import ReportManager

__all__ = [
    "ReportManager",
    "ReportKind",
    "ReportPeriod",
    "ReportRow",
    "ReportExport",
    "ExportFormat",
    "COLUMNS",
    "to_csv",
    "to_xlsx",
]
