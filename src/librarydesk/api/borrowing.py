"""Checkout, return and lending ledger endpoints."""

import logging

from flask import Blueprint
from flask_jwt_extended import get_jwt_identity, jwt_required

from ..lending.schemas import BorrowingRecordResponse, CheckoutRequest, ReturnRequest
from .helpers import dump, dump_many, parse_body, services

logger = logging.getLogger(__name__)

bp = Blueprint("borrowing", __name__, url_prefix="/borrowing")


@bp.before_request
@jwt_required()
def require_token():
    pass


@bp.post("/checkout")
def checkout():
    """Check a book out for 14 days."""
    data = parse_body(CheckoutRequest)
    record = services().lending.checkout(data.book_id, data.borrower_id)
    logger.info(
        "Checkout %s: book=%s borrower=%s due=%s by user=%s",
        record.id,
        record.book_id,
        record.borrower_id,
        record.due_date.isoformat(),
        get_jwt_identity(),
    )
    return dump(BorrowingRecordResponse, record, 201)


@bp.post("/return")
def return_book():
    """Return a book by record ID, or by book and borrower."""
    selector = parse_body(ReturnRequest).to_selector()
    record = services().lending.return_book(selector)
    logger.info(
        "Return %s: book=%s borrower=%s by user=%s",
        record.id,
        record.book_id,
        record.borrower_id,
        get_jwt_identity(),
    )
    return dump(BorrowingRecordResponse, record)


@bp.get("/borrower/<borrower_id>/current-books")
def current_books(borrower_id: str):
    records = services().lending.current_books_for_borrower(borrower_id)
    return dump_many(BorrowingRecordResponse, records)


@bp.get("/overdue")
def overdue():
    return dump_many(BorrowingRecordResponse, services().lending.overdue_books())


@bp.get("/records")
def records():
    return dump_many(BorrowingRecordResponse, services().lending.all_records())


@bp.get("/records/<record_id>")
def record(record_id: str):
    return dump(BorrowingRecordResponse, services().lending.get_record(record_id))
