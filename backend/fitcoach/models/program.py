"""Coach-authored program templates (programs, routines, exercises)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fitcoach.core.extensions import db

from .base import EtagMixin, ExternalIdMixin, PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .user import User

PROGRAM_TYPE_LIFTING = "lifting"
PROGRAM_TYPE_DIET = "diet"
PROGRAM_TYPE_POSING = "posing"
PROGRAM_TYPES = (PROGRAM_TYPE_LIFTING, PROGRAM_TYPE_DIET, PROGRAM_TYPE_POSING)

PROGRAM_STATUSES = ("draft", "active", "archived")

ProgramType = Enum(*PROGRAM_TYPES, name="program_type")
ProgramStatus = Enum(*PROGRAM_STATUSES, name="program_status")


class Program(PKMixin, ExternalIdMixin, TimestampMixin, EtagMixin, ReprMixin, db.Model):
    """
    Template authored by a coach and sold on the marketplace.

    Notes
    -----
    - ``type`` selects which payload is meaningful: routines (lifting),
      ``program_data["meal_plans"]`` (diet) or ``program_data["posing_plan"]``
      (posing). It never changes after creation.
    - ``cycle_length`` is the number of logged sessions in one full cycle.
    """

    __tablename__ = "programs"

    coach_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(160), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    type: Mapped[str] = mapped_column(ProgramType, nullable=False)
    price: Mapped[float] = mapped_column(
        Numeric(10, 2, asdecimal=False), nullable=False, default=0, server_default="0"
    )
    is_public: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default="1"
    )
    status: Mapped[str] = mapped_column(
        ProgramStatus, nullable=False, default="active", server_default="active"
    )
    cycle_length: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )
    program_data: Mapped[dict[str, Any] | None] = mapped_column(JSON)

    __table_args__ = (
        CheckConstraint("price >= 0", name="price_non_negative"),
        CheckConstraint("cycle_length >= 0", name="cycle_length_non_negative"),
        Index("ix_programs_coach", "coach_id"),
        Index("ix_programs_type", "type"),
    )

    coach: Mapped[User] = relationship("User", lazy="selectin")
    routines: Mapped[list[Routine]] = relationship(
        "Routine",
        back_populates="program",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Routine.order_in_cycle",
        lazy="selectin",
    )


class Routine(PKMixin, TimestampMixin, ReprMixin, db.Model):
    """One workout day of a lifting program, positioned by ``order_in_cycle``."""

    __tablename__ = "routines"

    program_id: Mapped[int] = mapped_column(
        ForeignKey("programs.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    day_of_week: Mapped[str | None] = mapped_column(String(20))
    order_in_cycle: Mapped[int] = mapped_column(Integer, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text)

    __table_args__ = (
        UniqueConstraint("program_id", "order_in_cycle", name="uq_routines_program_order"),
    )

    program: Mapped[Program] = relationship("Program", back_populates="routines")
    exercises: Mapped[list[ProgramExercise]] = relationship(
        "ProgramExercise",
        back_populates="routine",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ProgramExercise.order_in_routine",
        lazy="selectin",
    )


class ProgramExercise(PKMixin, TimestampMixin, ReprMixin, db.Model):
    """Planned exercise within a routine; ``reps`` is free-form (``"8-12"``)."""

    __tablename__ = "program_exercises"

    routine_id: Mapped[int] = mapped_column(
        ForeignKey("routines.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    sets: Mapped[int] = mapped_column(Integer, nullable=False)
    reps: Mapped[str] = mapped_column(String(40), nullable=False)
    rest_time: Mapped[str | None] = mapped_column(String(40))
    notes: Mapped[str | None] = mapped_column(Text)
    order_in_routine: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "routine_id", "order_in_routine", name="uq_program_exercises_routine_order"
        ),
        CheckConstraint("sets >= 1", name="sets_positive"),
    )

    routine: Mapped[Routine] = relationship("Routine", back_populates="exercises")
