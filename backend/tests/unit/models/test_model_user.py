"""Tests for the User model."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from fitcoach.models.user import User


class TestUser:
    def test_password_hashing(self, session):
        u = User(email="Test@Example.com", username="tester", role="client")
        u.password = "secret123"
        session.add(u)
        session.commit()
        assert u.verify_password("secret123") is True
        assert u.verify_password("wrong") is False

    def test_password_is_write_only(self):
        u = User(username="u1", role="client")
        u.password = "x"
        with pytest.raises(AttributeError):
            _ = u.password

    def test_email_normalized_and_unique(self, session):
        u1 = User(email="Alice@Example.com", username="alice", role="client")
        u1.password = "pw"
        session.add(u1)
        session.commit()
        assert u1.email == "alice@example.com"

        u2 = User(email="alice@example.com", username="alice2", role="coach")
        u2.password = "pw"
        session.add(u2)
        with pytest.raises(IntegrityError):
            session.commit()

    def test_email_is_optional(self):
        assert User(email="  ", username="noemail", role="client").email is None

    def test_username_unique(self, session):
        u1 = User(username="bob", role="client")
        u1.password = "pw"
        session.add(u1)
        session.commit()

        u2 = User(username="bob", role="client")
        u2.password = "pw"
        session.add(u2)
        with pytest.raises(IntegrityError):
            session.commit()

    def test_basic_validations(self):
        with pytest.raises(ValueError):
            User(email="not-an-email", username="u", role="client")
        with pytest.raises(ValueError):
            User(username=" ", role="client")
        with pytest.raises(ValueError):
            User(username="admin", role="admin")

    def test_role_is_fixed_once_set(self):
        u = User(username="fixed", role="client")
        with pytest.raises(ValueError):
            u.role = "coach"
        assert u.is_coach is False
