"""
SQLAlchemy implementation of UnitOfWork for Flask.
"""

from __future__ import annotations

import logging
from contextlib import suppress

from sqlalchemy import event, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import InvalidRequestError, SQLAlchemyError
from sqlalchemy.orm import Session, SessionTransaction

from fitcoach.core.extensions import db
from fitcoach.repositories import (
    BetaSignupRepository,
    ClientProgramRepository,
    MealLogRepository,
    ProfileRepository,
    ProgramRepository,
    UserRepository,
    WorkoutLogRepository,
)
from fitcoach.services._shared.errors import StorageError
from fitcoach.uow.base import UnitOfWork

logger = logging.getLogger(__name__)


class SQLAlchemyRepositoryContainer:
    """Provide repository instances that share a SQLAlchemy session."""

    def __init__(self, *, session: Session) -> None:
        self.session = session
        self.users = UserRepository(session=self.session)
        self.profiles = ProfileRepository(session=self.session)
        self.programs = ProgramRepository(session=self.session)
        self.enrollments = ClientProgramRepository(session=self.session)
        self.workout_logs = WorkoutLogRepository(session=self.session)
        self.meal_logs = MealLogRepository(session=self.session)
        self.beta_signups = BetaSignupRepository(session=self.session)


class SQLAlchemyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-write UoW using the Flask-scoped session.

    Commits when the block exits cleanly and rolls back otherwise, so a
    multi-statement operation is all-or-nothing. A failing commit surfaces
    as :class:`StorageError`.
    """

    def __init__(self) -> None:
        super().__init__(session=db.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.rollback()
            return
        try:
            self.commit()
        except SQLAlchemyError as commit_exc:
            self.rollback()
            logger.error("Transaction commit failed", exc_info=commit_exc)
            raise StorageError() from commit_exc

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyReadOnlyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-only UoW backed by the Flask-scoped session.

    - Applies ``SET TRANSACTION`` isolation/READ ONLY on PostgreSQL and MySQL
      when it owns the transaction.
    - Installs write guards (ORM flush and raw DML) for the scope.
    - Rolls back on exit when it owns the transaction; ``commit()`` is refused.

    When a transaction is already open on the session (an outer fixture or an
    earlier autobegin) the scope attaches to it instead of starting one.
    """

    _WRITE_PREFIXES = (
        "insert",
        "update",
        "delete",
        "merge",
        "alter",
        "drop",
        "truncate",
        "create",
        "replace",
        "grant",
        "revoke",
    )
    _SET_TRANSACTION_DIALECTS = ("postgresql", "mysql", "mariadb")

    def __init__(
        self,
        *,
        isolation_level: str | None = "READ COMMITTED",
        enforce_db_readonly: bool = True,
    ) -> None:
        super().__init__(session=db.session)
        self.isolation_level = isolation_level
        self.enforce_db_readonly = enforce_db_readonly
        self._conn: Connection | None = None
        self._txn_ctx: SessionTransaction | None = None
        self._listeners_installed = False

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        self._txn_ctx = None
        try:
            self._txn_ctx = self.session.begin()
        except InvalidRequestError:
            # Already inside a transaction: attach without SET TRANSACTION.
            pass

        self._conn = self.session.connection()
        self._install_listeners()

        if self._txn_ctx is not None and self._conn.dialect.name in self._SET_TRANSACTION_DIALECTS:
            try:
                if self.isolation_level:
                    iso = self.isolation_level.upper().strip()
                    self.session.execute(text(f"SET TRANSACTION ISOLATION LEVEL {iso}"))
                if self.enforce_db_readonly:
                    self.session.execute(text("SET TRANSACTION READ ONLY"))
            except SQLAlchemyError as exc:
                logger.warning("SET TRANSACTION directives failed (%s); guards only.", exc)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if self._txn_ctx is not None:
                with suppress(SQLAlchemyError):
                    self.session.rollback()
                self._txn_ctx = None
        finally:
            self._remove_listeners()
            self._conn = None

    def commit(self) -> None:
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()

    # ----------------------------- Guards & Listeners --------------------------

    def _install_listeners(self) -> None:
        if self._listeners_installed:
            return

        def _before_flush(session, flush_context, instances):
            if session.new or session.dirty or session.deleted:
                raise RuntimeError("Read-only UnitOfWork: ORM flush blocked.")

        def _before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
            first_token = statement.lstrip().split(None, 1)[0].lower() if statement else ""
            if first_token.startswith(self._WRITE_PREFIXES):
                raise RuntimeError(
                    f"Read-only UnitOfWork: SQL statement blocked: {first_token.upper()}"
                )

        event.listen(self.session, "before_flush", _before_flush)
        event.listen(self._conn, "before_cursor_execute", _before_cursor_execute)
        self._ro_before_flush = _before_flush
        self._ro_before_cursor_execute = _before_cursor_execute
        self._listeners_installed = True

    def _remove_listeners(self) -> None:
        if not self._listeners_installed:
            return
        with suppress(InvalidRequestError):
            event.remove(self.session, "before_flush", self._ro_before_flush)
        with suppress(InvalidRequestError):
            event.remove(self._conn, "before_cursor_execute", self._ro_before_cursor_execute)
        self._listeners_installed = False
