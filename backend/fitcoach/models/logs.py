"""Workout and meal logs recorded by clients against an enrollment."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from fitcoach.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin


class WorkoutLog(PKMixin, TimestampMixin, ReprMixin, db.Model):
    """
    One logged training session.

    ``routine_id`` has no foreign key and is stored as text: routines are replaced
    wholesale on program edits, and the log keeps ``routine_name`` and each
    ``exercise_name`` inside ``data`` so history stays readable.
    """

    __tablename__ = "workout_logs"

    client_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    client_program_id: Mapped[int] = mapped_column(
        ForeignKey("client_programs.id", ondelete="CASCADE"), nullable=False
    )
    routine_id: Mapped[str] = mapped_column(String(64), nullable=False)
    date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    __table_args__ = (
        Index("ix_workout_logs_client_enrollment", "client_id", "client_program_id"),
    )


class MealLog(PKMixin, TimestampMixin, ReprMixin, db.Model):
    """One logged meal; macros are plain columns for aggregation."""

    __tablename__ = "meal_logs"

    client_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    client_program_id: Mapped[int] = mapped_column(
        ForeignKey("client_programs.id", ondelete="CASCADE"), nullable=False
    )
    calories: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    protein: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    carbs: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    fats: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    __table_args__ = (
        Index("ix_meal_logs_client_enrollment", "client_id", "client_program_id"),
    )
