"""Workout and meal logging."""

from __future__ import annotations

from .dto import (
    ExerciseEntryIn,
    MealLogIn,
    MealLogOut,
    MealLogUpdateIn,
    SetIn,
    WorkoutLogIn,
    WorkoutLogOut,
    WorkoutLogUpdateIn,
)
from .progress import fold_workout
from .service import MAX_MACRO, UNKNOWN_EXERCISE, LogService

__all__ = [
    "LogService",
    "MAX_MACRO",
    "UNKNOWN_EXERCISE",
    "fold_workout",
    "ExerciseEntryIn",
    "MealLogIn",
    "MealLogOut",
    "MealLogUpdateIn",
    "SetIn",
    "WorkoutLogIn",
    "WorkoutLogOut",
    "WorkoutLogUpdateIn",
]
