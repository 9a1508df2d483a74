"""Pytest configuration and shared fixtures.

This module provides fixtures for testing the librarydesk application,
including an in-memory database, managers on a pinned clock, and a Flask
test client with a bearer token.
"""

from datetime import datetime, timedelta
from typing import Generator

import pytest
from flask import Flask
from flask.testing import FlaskClient

from librarydesk.api import create_app
from librarydesk.auth import AuthManager, RegisterRequest
from librarydesk.catalog import BookCreate, CatalogManager
from librarydesk.config import Config, reset_config
from librarydesk.db import Database, reset_db
from librarydesk.lending import LendingManager
from librarydesk.patrons import BorrowerCreate, PatronManager
from librarydesk.reports import ReportManager

NOW = datetime(2025, 3, 15, 10, 0, 0)

TEST_PASSWORD = "s3cret-pass"


class FrozenClock:
    """A clock that only moves when a test moves it."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def set(self, now: datetime) -> None:
        self.now = now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def reset_globals() -> Generator[None, None, None]:
    """Keep the global config and database from leaking between tests."""
    reset_db()
    reset_config()
    yield
    reset_db()
    reset_config()


@pytest.fixture
def db() -> Database:
    """Create an in-memory database for testing."""
    database = Database(":memory:")
    database.create_tables()
    return database


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(NOW)


# ============================================================================
# Manager Fixtures
# ============================================================================


@pytest.fixture
def catalog(db: Database) -> CatalogManager:
    return CatalogManager(db)


@pytest.fixture
def patrons(db: Database) -> PatronManager:
    return PatronManager(db)


@pytest.fixture
def lending(db: Database, clock: FrozenClock) -> LendingManager:
    return LendingManager(db, clock=clock)


@pytest.fixture
def reports(db: Database, clock: FrozenClock) -> ReportManager:
    return ReportManager(db, clock=clock)


@pytest.fixture
def auth(db: Database) -> AuthManager:
    return AuthManager(db)


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def book(catalog: CatalogManager):
    """A book with two copies."""
    return catalog.register(
        BookCreate(
            title="The Left Hand of Darkness",
            author="Ursula K. Le Guin",
            isbn="978-0-441-47812-5",
            total_quantity=2,
            shelf_location="B2-04",
        )
    )


@pytest.fixture
def single_copy_book(catalog: CatalogManager):
    """A book with exactly one copy."""
    return catalog.register(
        BookCreate(
            title="Solaris",
            author="Stanislaw Lem",
            isbn="978-0-15-602760-1",
            total_quantity=1,
            shelf_location="C1-01",
        )
    )


@pytest.fixture
def borrower(patrons: PatronManager):
    return patrons.register(BorrowerCreate(name="Ada Lovelace", email="ada@example.com"))


@pytest.fixture
def other_borrower(patrons: PatronManager):
    return patrons.register(BorrowerCreate(name="Alan Turing", email="alan@example.com"))


# ============================================================================
# API Fixtures
# ============================================================================


@pytest.fixture
def config() -> Config:
    return Config(
        database_url="sqlite://",
        jwt_secret_key="test-secret-key-that-is-long-enough-for-hs256",
        jwt_expires_minutes=5,
        host="127.0.0.1",
        port=5000,
        log_level="INFO",
    )


@pytest.fixture
def app(config: Config, db: Database, clock: FrozenClock) -> Flask:
    flask_app = create_app(config, db, clock=clock)
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture
def client(app: Flask) -> FlaskClient:
    return app.test_client()


@pytest.fixture
def auth_headers(client: FlaskClient, auth: AuthManager) -> dict:
    """Authorization header for a freshly registered librarian."""
    auth.register(
        RegisterRequest(username="librarian", email="librarian@example.com", password=TEST_PASSWORD)
    )
    response = client.post(
        "/auth/login", json={"username": "librarian", "password": TEST_PASSWORD}
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.get_json()['access_token']}"}
