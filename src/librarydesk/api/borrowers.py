"""Borrower endpoints."""

import logging

from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from ..patrons.schemas import BorrowerCreate, BorrowerResponse, BorrowerUpdate
from .helpers import dump, dump_many, parse_body, services

logger = logging.getLogger(__name__)

bp = Blueprint("borrowers", __name__, url_prefix="/borrowers")


@bp.before_request
@jwt_required()
def require_token():
    pass


@bp.post("")
def create_borrower():
    borrower = services().patrons.register(parse_body(BorrowerCreate))
    logger.info("Borrower registered: %s (%s)", borrower.name, borrower.email)
    return dump(BorrowerResponse, borrower, 201)


@bp.get("")
def list_borrowers():
    return dump_many(BorrowerResponse, services().patrons.list_all())


@bp.get("/search")
def search_borrowers():
    """Search by name or email. An empty query matches everything."""
    return dump_many(BorrowerResponse, services().patrons.search(request.args.get("q", "")))


@bp.get("/<borrower_id>")
def get_borrower(borrower_id: str):
    return dump(BorrowerResponse, services().patrons.get(borrower_id))


@bp.patch("/<borrower_id>")
def update_borrower(borrower_id: str):
    borrower = services().patrons.update(borrower_id, parse_body(BorrowerUpdate))
    return dump(BorrowerResponse, borrower)


@bp.delete("/<borrower_id>")
def delete_borrower(borrower_id: str):
    services().patrons.remove(borrower_id)
    logger.info("Borrower removed: %s", borrower_id)
    return "", 204
