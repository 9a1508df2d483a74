"""Registration and token login endpoints."""

import logging

from flask import Blueprint, jsonify
from flask_jwt_extended import create_access_token

from ..auth.schemas import LoginRequest, RegisterRequest, TokenResponse, UserResponse
from ..errors import UnauthorizedError
from .helpers import dump, parse_body, services

logger = logging.getLogger(__name__)

bp = Blueprint("auth", __name__, url_prefix="/auth")


@bp.post("/register")
def register():
    """Create a librarian account."""
    user = services().auth.register(parse_body(RegisterRequest))
    logger.info("User registered: %s", user.username)
    return dump(UserResponse, user, 201)


@bp.post("/login")
def login():
    """Exchange a username and password for a bearer token."""
    data = parse_body(LoginRequest)
    try:
        user = services().auth.authenticate(data.username, data.password)
    except UnauthorizedError:
        logger.warning("Login failed for %s", data.username)
        raise

    token = create_access_token(
        identity=user.id,
        additional_claims={"username": user.username, "role": user.role},
    )
    logger.info("User logged in: %s", user.username)
    response = TokenResponse(access_token=token, user=UserResponse.model_validate(user))
    return jsonify(response.model_dump(mode="json"))
