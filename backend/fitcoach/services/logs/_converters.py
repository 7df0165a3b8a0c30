from __future__ import annotations

from fitcoach.models.base import as_utc
from fitcoach.models.logs import MealLog, WorkoutLog

from .dto import MealLogOut, WorkoutLogOut


def workout_log_to_out(row: WorkoutLog) -> WorkoutLogOut:
    data = row.data or {}
    return WorkoutLogOut(
        id=row.id,
        client_id=row.client_id,
        enrollment_id=row.client_program_id,
        routine_id=row.routine_id,
        routine_name=data.get("routine_name") or "",
        date=as_utc(row.date),
        exercise_logs=list(data.get("exercise_logs") or []),
        notes=data.get("notes"),
    )


def meal_log_to_out(row: MealLog) -> MealLogOut:
    data = row.data or {}
    return MealLogOut(
        id=row.id,
        client_id=row.client_id,
        enrollment_id=row.client_program_id,
        calories=int(row.calories or 0),
        protein=int(row.protein or 0),
        carbs=int(row.carbs or 0),
        fats=int(row.fats or 0),
        date=as_utc(row.date),
        notes=data.get("notes"),
    )
