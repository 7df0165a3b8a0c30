"""Pytest fixtures configuring an isolated transactional database layer.

Each test runs inside a SAVEPOINT-backed transaction against an in-memory
SQLite database so data changes never leak between cases.
"""

from __future__ import annotations

import os

import pytest
from flask_jwt_extended import create_access_token
from sqlalchemy import event
from sqlalchemy.orm import scoped_session, sessionmaker
from sqlalchemy.pool import StaticPool

from fitcoach.core.config import TestingConfig
from fitcoach.core.extensions import db as _db
from fitcoach.factory import create_app
from fitcoach.services._shared.base import ServiceContext


class TestConfig(TestingConfig):
    """Testing configuration for creating the Flask app.

    Notes
    -----
    - A single shared in-memory SQLite connection (``StaticPool``) so every
      session sees the same database.
    - No Redis; the in-memory token denylist is used.
    """

    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_ENGINE_OPTIONS = {
        "poolclass": StaticPool,
        "connect_args": {"check_same_thread": False},
    }
    LOG_LEVEL = "WARNING"


@pytest.fixture(scope="session")
def app():
    """Create a Flask application configured for testing."""
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    app = create_app(TestConfig, instance_relative_config=False)
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture(scope="session")
def db(app):
    """Create database tables once per test session."""
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    """Keep a dedicated DBAPI connection open for the whole session."""
    conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(db, connection):
    """Provide a SQLAlchemy session wrapped in a nested transaction.

    Notes
    -----
    A top-level transaction is opened per test with a SAVEPOINT inside it;
    the SAVEPOINT is reinstalled whenever SQLAlchemy ends one. Services
    commit and roll back against this SAVEPOINT, so data created by factories
    must be committed (``session.commit()``) before exercising a code path
    that is expected to roll back.
    """
    top_trans = connection.begin()

    SessionFactory = sessionmaker(bind=connection, future=True)
    scoped = scoped_session(SessionFactory)

    nested = connection.begin_nested()

    @event.listens_for(scoped(), "after_transaction_end")
    def _restart_savepoint(sess, trans):  # pragma: no cover
        if trans.nested and not trans._parent.nested:
            nonlocal nested
            nested = connection.begin_nested()

    original_session = db.session
    db.session.remove()
    db.session = scoped

    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = original_session
        top_trans.rollback()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


# -- Hook up Factory Boy to pytest SQLAlchemy session --------------------------
@pytest.fixture(autouse=True)
def _factories_session(session):
    """Wire Factory Boy's session helper to the transactional session fixture."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield


# -- Caller helpers --------------------------------------------------------------
@pytest.fixture()
def ctx_for():
    """Build a :class:`ServiceContext` for a persisted user."""

    def _build(user) -> ServiceContext:
        return ServiceContext(actor_id=user.id, role=user.role, request_id="test")

    return _build


@pytest.fixture()
def client(app, session):
    """Flask test client sharing the transactional session."""
    return app.test_client()


@pytest.fixture()
def auth_headers(app):
    """Return ``Authorization`` headers carrying a token for ``user``."""

    def _headers(user) -> dict[str, str]:
        user_id, role = user.id, user.role
        with app.test_request_context():
            token = create_access_token(
                identity=str(user_id), additional_claims={"role": role, "uid": user_id}
            )
        return {"Authorization": f"Bearer {token}"}

    return _headers
