from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

# ------------------------------ Input DTOs ------------------------------- #


@dataclass(frozen=True, slots=True)
class SetIn:
    reps: float
    weight: float | None = None


@dataclass(frozen=True, slots=True)
class ExerciseEntryIn:
    exercise_id: int | str
    sets: tuple[SetIn, ...] = ()


@dataclass(frozen=True, slots=True)
class WorkoutLogIn:
    """
    One workout submission against an enrollment.

    :param routine_id: Routine from the enrollment's effective routine set.
    :param exercise_logs: Per-exercise sets; unknown exercise ids are kept.
    :param date: Defaults to the write time.
    """

    enrollment_id: int
    routine_id: int | str
    exercise_logs: tuple[ExerciseEntryIn, ...] = ()
    notes: str | None = None
    date: datetime | None = None


@dataclass(frozen=True, slots=True)
class WorkoutLogUpdateIn:
    """Full replacement of a workout log's entries and notes."""

    log_id: int
    exercise_logs: tuple[ExerciseEntryIn, ...] = ()
    notes: str | None = None
    date: datetime | None = None


@dataclass(frozen=True, slots=True)
class MealLogIn:
    """Macros default to 0 when absent."""

    enrollment_id: int
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fats: float = 0
    notes: str | None = None
    date: datetime | None = None


@dataclass(frozen=True, slots=True)
class MealLogUpdateIn:
    log_id: int
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fats: float = 0
    notes: str | None = None
    date: datetime | None = None


# ------------------------------ Output DTOs ------------------------------ #


@dataclass(frozen=True, slots=True)
class WorkoutLogOut:
    id: int
    client_id: int
    enrollment_id: int
    routine_id: str
    routine_name: str
    date: datetime | None
    exercise_logs: list[dict[str, Any]] = field(default_factory=list)
    notes: str | None = None


@dataclass(frozen=True, slots=True)
class MealLogOut:
    id: int
    client_id: int
    enrollment_id: int
    calories: int
    protein: int
    carbs: int
    fats: int
    date: datetime | None
    notes: str | None = None
