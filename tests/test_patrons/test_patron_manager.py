"""Tests for PatronManager."""

import pytest
from pydantic import ValidationError

from librarydesk.errors import ConflictError, NotFoundError
from librarydesk.lending.schemas import ByRecordId
from librarydesk.patrons import BorrowerCreate, BorrowerUpdate


class TestRegisterBorrower:
    """Tests for registering borrowers."""

    def test_register(self, patrons, clock):
        borrower = patrons.register(BorrowerCreate(name="Grace Hopper", email="grace@example.com"))

        assert borrower.id is not None
        assert borrower.name == "Grace Hopper"
        assert borrower.registered_date is not None

    def test_email_is_normalized(self, patrons):
        borrower = patrons.register(BorrowerCreate(name="Grace", email="  Grace@Example.COM "))
        assert borrower.email == "grace@example.com"

    def test_duplicate_email(self, patrons, borrower):
        with pytest.raises(ConflictError, match="already exists"):
            patrons.register(BorrowerCreate(name="Someone Else", email=borrower.email))

        assert len(patrons.list_all()) == 1

    def test_invalid_email(self):
        with pytest.raises(ValidationError):
            BorrowerCreate(name="Nobody", email="not-an-email")

    def test_invalid_email_forms(self):
        for email in ["a@b", "two@@example.com", "spaced out@example.com", "@example.com"]:
            with pytest.raises(ValidationError):
                BorrowerCreate(name="Nobody", email=email)

    def test_overlong_email(self):
        with pytest.raises(ValidationError, match="at most 200"):
            BorrowerCreate(
                name="Nobody",
                email="a" * 64 + "@" + "b" * 63 + "." + "c" * 63 + "." + "d" * 10 + ".com",
            )


class TestBorrowerQueries:
    """Tests for reading borrowers."""

    def test_get(self, patrons, borrower):
        assert patrons.get(borrower.id).email == borrower.email

    def test_get_missing(self, patrons):
        with pytest.raises(NotFoundError):
            patrons.get("missing")

    def test_search(self, patrons, borrower, other_borrower):
        assert [b.id for b in patrons.search("lovelace")] == [borrower.id]
        assert [b.id for b in patrons.search("alan@")] == [other_borrower.id]


class TestUpdateBorrower:
    """Tests for editing borrowers."""

    def test_update_name(self, patrons, borrower):
        updated = patrons.update(borrower.id, BorrowerUpdate(name="Augusta Ada King"))

        assert updated.name == "Augusta Ada King"
        assert updated.email == borrower.email

    def test_update_to_taken_email(self, patrons, borrower, other_borrower):
        with pytest.raises(ConflictError):
            patrons.update(borrower.id, BorrowerUpdate(email=other_borrower.email))

    def test_update_email_is_normalized(self, patrons, borrower):
        updated = patrons.update(borrower.id, BorrowerUpdate(email=" Countess@Example.COM"))

        assert updated.email == "countess@example.com"

    def test_update_invalid_email(self):
        with pytest.raises(ValidationError):
            BorrowerUpdate(email="countess.example.com")

    def test_update_missing(self, patrons):
        with pytest.raises(NotFoundError):
            patrons.update("missing", BorrowerUpdate(name="x"))


class TestRemoveBorrower:
    """Tests for deleting borrowers."""

    def test_remove(self, patrons, borrower):
        patrons.remove(borrower.id)

        with pytest.raises(NotFoundError):
            patrons.get(borrower.id)

    def test_remove_with_open_loan(self, patrons, lending, book, borrower):
        lending.checkout(book.id, borrower.id)

        with pytest.raises(ConflictError):
            patrons.remove(borrower.id)

    def test_remove_after_return(self, patrons, lending, catalog, book, borrower):
        record = lending.checkout(book.id, borrower.id)
        lending.return_book(ByRecordId(record_id=record.id))

        patrons.remove(borrower.id)

        assert lending.all_records() == []
        assert catalog.get(book.id).available_quantity == book.total_quantity
