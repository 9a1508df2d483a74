"""Domain errors raised by the managers.

Each error carries the HTTP status code the API layer answers with, so the
managers never need to know about Flask.
"""


class LibraryError(Exception):
    """Base class for librarydesk errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(LibraryError):
    """A referenced book, borrower, borrowing record or user does not exist."""

    status_code = 404


class ConflictError(LibraryError):
    """A uniqueness rule was violated, or the entity is still in use."""

    status_code = 409


class InvalidRequestError(LibraryError):
    """A business rule was violated (unavailable book, duplicate checkout, ...)."""

    status_code = 400


class UnauthorizedError(LibraryError):
    """Missing or invalid credentials."""

    status_code = 401
