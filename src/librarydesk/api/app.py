"""Flask application factory for the librarydesk HTTP API."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from flask import Flask, jsonify
from flask_jwt_extended import JWTManager
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

from ..auth import AuthManager
from ..catalog import CatalogManager
from ..config import Config, get_config
from ..db.database import Database
from ..errors import LibraryError
from ..lending import LendingManager
from ..patrons import PatronManager
from ..reports import ReportManager

logger = logging.getLogger(__name__)

EXTENSION_KEY = "librarydesk"


@dataclass
class Services:
    """The managers a request handler works with, bound to one database."""

    db: Database
    auth: AuthManager
    catalog: CatalogManager
    patrons: PatronManager
    lending: LendingManager
    reports: ReportManager


def create_app(
    config: Optional[Config] = None,
    db: Optional[Database] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> Flask:
    """Create and configure the Flask application.

    Args:
        config: Application configuration (default: loaded from the environment)
        db: Database to serve (default: built from ``config.database_url``)
        clock: Time source for lending and reports (default: utcnow)
    """
    config = config or get_config()
    if db is None:
        db = Database(config.database_url)
    db.create_tables()

    app = Flask(__name__)
    app.config["JWT_SECRET_KEY"] = config.jwt_secret_key
    app.config["JWT_ACCESS_TOKEN_EXPIRES"] = timedelta(minutes=config.jwt_expires_minutes)

    for problem in config.validate():
        logger.warning("Configuration: %s", problem)

    app.extensions[EXTENSION_KEY] = Services(
        db=db,
        auth=AuthManager(db),
        catalog=CatalogManager(db),
        patrons=PatronManager(db),
        lending=LendingManager(db, clock=clock),
        reports=ReportManager(db, clock=clock),
    )

    _register_jwt(JWTManager(app))
    _register_error_handlers(app)
    _register_blueprints(app)

    @app.get("/health")
    def health():
        """Liveness check."""
        return jsonify({"status": "ok"})

    return app


def _register_blueprints(app: Flask) -> None:
    from .auth import bp as auth_bp
    from .books import bp as books_bp
    from .borrowers import bp as borrowers_bp
    from .borrowing import bp as borrowing_bp
    from .reports import bp as reports_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(books_bp)
    app.register_blueprint(borrowers_bp)
    app.register_blueprint(borrowing_bp)
    app.register_blueprint(reports_bp)


def _register_jwt(jwt: JWTManager) -> None:
    """Answer every token problem with the same JSON error shape."""

    @jwt.unauthorized_loader
    def missing_token(reason: str):
        return jsonify({"error": "Authorization required", "detail": reason}), 401

    @jwt.invalid_token_loader
    def invalid_token(reason: str):
        return jsonify({"error": "Invalid token", "detail": reason}), 401

    @jwt.expired_token_loader
    def expired_token(jwt_header: dict, jwt_payload: dict):
        return jsonify({"error": "Token has expired"}), 401


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(LibraryError)
    def library_error(e: LibraryError):
        return jsonify({"error": e.message}), e.status_code

    @app.errorhandler(ValidationError)
    def validation_error(e: ValidationError):
        details = [
            {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
            for err in e.errors()
        ]
        return jsonify({"error": "Validation failed", "details": details}), 400

    @app.errorhandler(HTTPException)
    def http_error(e: HTTPException):
        return jsonify({"error": e.description}), e.code

    @app.errorhandler(500)
    def internal_error(e):
        logger.exception("Unhandled error: %s", getattr(e, "original_exception", e))
        return jsonify({"error": "Internal server error"}), 500
