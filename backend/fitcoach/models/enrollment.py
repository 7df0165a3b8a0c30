"""Client enrollments in coach programs."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Index, Integer, func, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fitcoach.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .program import Program
    from .user import User

PROGRESS_SCHEMA_VERSION = 1


def empty_enrollment_data() -> dict[str, Any]:
    """Fresh ``client_program_data``: no customizations, empty progress."""
    return {
        "schema_version": PROGRESS_SCHEMA_VERSION,
        "progress": {"completed": [], "notes": [], "last_workout": None, "streak": 0},
    }


class ClientProgram(PKMixin, TimestampMixin, ReprMixin, db.Model):
    """
    One client's enrollment in a program.

    Notes
    -----
    - At most one *active* row per ``(client_id, program_id)``; enforced by a
      partial unique index.
    - ``client_program_data`` holds ``customizations`` (optional overrides of
      the template) and ``progress``.
    - ``version`` increases by one whenever a structural override is stored.
    """

    __tablename__ = "client_programs"

    client_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    program_id: Mapped[int] = mapped_column(
        ForeignKey("programs.id", ondelete="CASCADE"), nullable=False
    )
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default="1")
    start_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1, server_default="1")
    client_program_data: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=empty_enrollment_data
    )

    __table_args__ = (
        Index(
            "uq_client_programs_active_enrollment",
            "client_id",
            "program_id",
            unique=True,
            postgresql_where=text("active"),
            sqlite_where=text("active"),
        ),
        Index("ix_client_programs_program", "program_id"),
    )

    client: Mapped[User] = relationship("User", lazy="selectin")
    program: Mapped[Program] = relationship("Program", lazy="selectin")

    @property
    def progress(self) -> dict[str, Any]:
        return dict((self.client_program_data or {}).get("progress") or {})

    @property
    def customizations(self) -> dict[str, Any]:
        return dict((self.client_program_data or {}).get("customizations") or {})
