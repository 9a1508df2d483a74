"""Demo data for a fresh database.

Loan dates are relative to the clock, so a freshly seeded database always
has active, overdue and returned loans to look at.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from sqlalchemy import func, select

from .auth.manager import hash_password
from .auth.models import User
from .catalog.models import Book
from .db.database import Database
from .db.models import utcnow
from .lending.manager import LOAN_PERIOD_DAYS
from .lending.models import BorrowingRecord
from .patrons.models import Borrower

logger = logging.getLogger(__name__)

DEMO_USERNAME = "librarian"
DEMO_PASSWORD = "password123"

BOOKS = [
    ("The Great Gatsby", "F. Scott Fitzgerald", "978-0-7432-7356-5", 3, "A1-B2"),
    ("To Kill a Mockingbird", "Harper Lee", "978-0-06-112008-4", 2, "A2-C1"),
    ("1984", "George Orwell", "978-0-452-28423-4", 4, "B1-A3"),
    ("Pride and Prejudice", "Jane Austen", "978-0-14-143951-8", 2, "C1-B2"),
    ("The Catcher in the Rye", "J.D. Salinger", "978-0-316-76948-0", 3, "A3-C2"),
]

BORROWERS = [
    ("John Smith", "john.smith@email.com"),
    ("Emily Johnson", "emily.johnson@email.com"),
    ("Michael Brown", "michael.brown@email.com"),
    ("Sarah Davis", "sarah.davis@email.com"),
]

# (book index, borrower index, days since checkout, days since return or None)
LOANS = [
    (0, 0, 3, None),  # active
    (1, 1, 20, None),  # overdue
    (2, 2, 25, None),  # overdue
    (3, 3, 15, 13),  # returned on time
    (4, 0, 30, 10),  # returned late
]


def seed_database(db: Database, clock: Optional[Callable[[], datetime]] = None) -> bool:
    """Fill an empty database with demo users, books, borrowers and loans.

    Args:
        db: Database to seed
        clock: Time the loan dates are relative to (default: utcnow)

    Returns:
        False if the database already had books and was left alone
    """
    now = (clock or utcnow)()

    with db.get_session() as session:
        if session.execute(select(func.count()).select_from(Book)).scalar():
            logger.info("Database already seeded, skipping")
            return False

        session.add(
            User(
                username=DEMO_USERNAME,
                email="librarian@library.com",
                password_hash=hash_password(DEMO_PASSWORD),
            )
        )

        books = [
            Book(
                title=title,
                author=author,
                isbn=isbn,
                total_quantity=total,
                available_quantity=total,
                shelf_location=shelf,
            )
            for title, author, isbn, total, shelf in BOOKS
        ]
        borrowers = [Borrower(name=name, email=email) for name, email in BORROWERS]
        session.add_all(books + borrowers)
        session.flush()

        for book_index, borrower_index, days_out, days_back in LOANS:
            book = books[book_index]
            checkout_date = now - timedelta(days=days_out)
            session.add(
                BorrowingRecord(
                    book_id=book.id,
                    borrower_id=borrowers[borrower_index].id,
                    checkout_date=checkout_date,
                    due_date=checkout_date + timedelta(days=LOAN_PERIOD_DAYS),
                    return_date=now - timedelta(days=days_back) if days_back is not None else None,
                )
            )
            if days_back is None:
                book.available_quantity -= 1

    logger.info(
        "Seeded %d books, %d borrowers and %d loans", len(BOOKS), len(BORROWERS), len(LOANS)
    )
    return True
