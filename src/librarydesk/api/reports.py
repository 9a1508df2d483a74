"""Last-month report endpoints and file exports."""

import logging

from flask import Blueprint, Response, request
from flask_jwt_extended import jwt_required

from ..errors import InvalidRequestError, NotFoundError
from ..lending.schemas import BorrowingRecordResponse
from ..reports.schemas import ExportFormat, ReportKind
from .helpers import dump_many, services

logger = logging.getLogger(__name__)

bp = Blueprint("reports", __name__, url_prefix="/reports")


@bp.before_request
@jwt_required()
def require_token():
    pass


@bp.get("/overdue-last-month")
def overdue_last_month():
    records = services().reports.overdue_last_month()
    logger.info("Report overdue-last-month: %d record(s)", len(records))
    return dump_many(BorrowingRecordResponse, records)


@bp.get("/borrowing-last-month")
def borrowing_last_month():
    records = services().reports.borrowing_last_month()
    logger.info("Report borrowing-last-month: %d record(s)", len(records))
    return dump_many(BorrowingRecordResponse, records)


@bp.get("/export/<report>")
def export(report: str):
    """Download a report as CSV or XLSX (default)."""
    try:
        kind = ReportKind(report)
    except ValueError:
        raise NotFoundError(f"Unknown report: {report}") from None

    requested = request.args.get("format", ExportFormat.XLSX.value).lower()
    try:
        fmt = ExportFormat(requested)
    except ValueError:
        raise InvalidRequestError(
            f"Unsupported format '{requested}', expected csv or xlsx"
        ) from None

    result = services().reports.export(kind, fmt)
    logger.info(
        "Exported %s as %s: %d row(s)", kind.value, fmt.value, result.row_count
    )
    return Response(
        result.content,
        status=200,
        content_type=result.content_type,
        headers={"Content-Disposition": f'attachment; filename="{result.filename}"'},
    )
