"""Tests for AuthManager."""

import pytest
from pydantic import ValidationError

from librarydesk.auth import AuthManager, RegisterRequest, check_password, hash_password
from librarydesk.errors import ConflictError, NotFoundError, UnauthorizedError


def make_user(**overrides) -> RegisterRequest:
    data = {"username": "frontdesk", "email": "desk@example.com", "password": "hunter22"}
    data.update(overrides)
    return RegisterRequest(**data)


class TestPasswordHashing:
    """Tests for bcrypt helpers."""

    def test_hash_is_not_plaintext(self):
        hashed = hash_password("hunter22")

        assert hashed != "hunter22"
        assert hashed.startswith("$2")

    def test_check(self):
        hashed = hash_password("hunter22")

        assert check_password("hunter22", hashed)
        assert not check_password("hunter23", hashed)


class TestRegister:
    """Tests for registering users."""

    def test_register(self, auth: AuthManager):
        user = auth.register(make_user())

        assert user.id is not None
        assert user.username == "frontdesk"
        assert user.role == "librarian"
        assert check_password("hunter22", user.password_hash)

    def test_register_with_role(self, auth: AuthManager):
        user = auth.register(make_user(role="admin"))
        assert user.role == "admin"

    def test_duplicate_username(self, auth: AuthManager):
        auth.register(make_user())

        with pytest.raises(ConflictError):
            auth.register(make_user(email="other@example.com"))

    def test_duplicate_email(self, auth: AuthManager):
        auth.register(make_user())

        with pytest.raises(ConflictError):
            auth.register(make_user(username="someone"))

    def test_username_and_email_taken_by_different_users(self, auth: AuthManager):
        """Both identifiers clashing with two separate accounts is still a conflict."""
        auth.register(make_user(username="alice", email="a@example.com"))
        auth.register(make_user(username="bob", email="b@example.com"))

        with pytest.raises(ConflictError):
            auth.register(make_user(username="alice", email="b@example.com"))

    def test_short_password(self):
        with pytest.raises(ValidationError):
            make_user(password="12345")

    def test_email_is_normalized(self, auth: AuthManager):
        user = auth.register(make_user(email=" Desk@Example.COM "))

        assert user.email == "desk@example.com"

    def test_invalid_email(self):
        with pytest.raises(ValidationError):
            make_user(email="desk@")


class TestAuthenticate:
    """Tests for credential checks."""

    def test_authenticate(self, auth: AuthManager):
        registered = auth.register(make_user())

        user = auth.authenticate("frontdesk", "hunter22")

        assert user.id == registered.id

    def test_wrong_password(self, auth: AuthManager):
        auth.register(make_user())

        with pytest.raises(UnauthorizedError):
            auth.authenticate("frontdesk", "wrong-password")

    def test_unknown_user(self, auth: AuthManager):
        with pytest.raises(UnauthorizedError):
            auth.authenticate("ghost", "hunter22")

    def test_get(self, auth: AuthManager):
        registered = auth.register(make_user())
        assert auth.get(registered.id).username == "frontdesk"

    def test_get_missing(self, auth: AuthManager):
        with pytest.raises(NotFoundError):
            auth.get("missing")
