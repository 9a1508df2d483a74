"""Book catalog endpoints."""

import logging

from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from ..catalog.schemas import BookCreate, BookResponse, BookUpdate
from .helpers import dump, dump_many, parse_body, services

logger = logging.getLogger(__name__)

bp = Blueprint("books", __name__, url_prefix="/books")


@bp.before_request
@jwt_required()
def require_token():
    pass


@bp.post("")
def create_book():
    book = services().catalog.register(parse_body(BookCreate))
    logger.info("Book registered: %s (%s)", book.title, book.isbn)
    return dump(BookResponse, book, 201)


@bp.get("")
def list_books():
    return dump_many(BookResponse, services().catalog.list_all())


@bp.get("/search")
def search_books():
    """Search by title, author or ISBN. An empty query matches everything."""
    return dump_many(BookResponse, services().catalog.search(request.args.get("q", "")))


@bp.get("/<book_id>")
def get_book(book_id: str):
    return dump(BookResponse, services().catalog.get(book_id))


@bp.patch("/<book_id>")
def update_book(book_id: str):
    book = services().catalog.update(book_id, parse_body(BookUpdate))
    return dump(BookResponse, book)


@bp.delete("/<book_id>")
def delete_book(book_id: str):
    services().catalog.remove(book_id)
    logger.info("Book removed: %s", book_id)
    return "", 204
