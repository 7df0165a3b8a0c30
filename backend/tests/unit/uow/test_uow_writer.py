"""
Unit tests for SQLAlchemyUnitOfWork (writer), using factories.
"""

from __future__ import annotations

import pytest
from sqlalchemy.exc import SQLAlchemyError

from fitcoach.models import User
from fitcoach.services._shared.errors import StorageError
from fitcoach.uow import SQLAlchemyUnitOfWork
from tests.factories.user import ClientFactory


class TestSQLAlchemyUnitOfWorkWriter:
    def test_writer_uow_commits_on_success(self, app, db, session):
        initial = db.session.query(User).count()

        with SQLAlchemyUnitOfWork() as uow:
            uow.users.add(ClientFactory.build())

        assert db.session.query(User).count() == initial + 1

    def test_writer_uow_rolls_back_on_exception(self, app, db, session):
        initial = db.session.query(User).count()

        with pytest.raises(RuntimeError), SQLAlchemyUnitOfWork() as uow:
            uow.users.add(ClientFactory.build())
            raise RuntimeError("boom")

        assert db.session.query(User).count() == initial

    def test_failed_commit_becomes_storage_error(self, app, db, session, monkeypatch):
        uow = SQLAlchemyUnitOfWork()

        def _fail():
            raise SQLAlchemyError("disk full")

        monkeypatch.setattr(uow, "commit", _fail)
        with pytest.raises(StorageError), uow:
            pass
