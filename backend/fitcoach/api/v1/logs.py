"""Workout and meal log endpoints for clients."""

from __future__ import annotations

from typing import Any

from flask import Blueprint

from fitcoach.api.deps import current_context, json_body, json_response, require_role, timing
from fitcoach.models.user import ROLE_CLIENT
from fitcoach.schemas import (
    MealLogCreateSchema,
    MealLogSchema,
    MealLogUpdateSchema,
    WorkoutLogCreateSchema,
    WorkoutLogSchema,
    WorkoutLogUpdateSchema,
)
from fitcoach.services.logs import (
    ExerciseEntryIn,
    LogService,
    MealLogIn,
    MealLogUpdateIn,
    SetIn,
    WorkoutLogIn,
    WorkoutLogUpdateIn,
)

workouts_bp = Blueprint("workouts", __name__)
meals_bp = Blueprint("meals", __name__)

workout_schema = WorkoutLogSchema()
workout_create_schema = WorkoutLogCreateSchema()
workout_update_schema = WorkoutLogUpdateSchema()
meal_schema = MealLogSchema()
meal_create_schema = MealLogCreateSchema()
meal_update_schema = MealLogUpdateSchema()


def _entries(raw: list[dict[str, Any]]) -> tuple[ExerciseEntryIn, ...]:
    return tuple(
        ExerciseEntryIn(
            exercise_id=entry["exercise_id"],
            sets=tuple(SetIn(reps=s["reps"], weight=s.get("weight")) for s in entry["sets"]),
        )
        for entry in raw
    )


# ------------------------------- Workouts ---------------------------------- #


@workouts_bp.post("")
@require_role(ROLE_CLIENT)
@timing
def log_workout():
    """Log a workout against a routine of one of the caller's enrollments."""

    payload = workout_create_schema.load(json_body())
    dto = WorkoutLogIn(
        enrollment_id=payload["enrollment_id"],
        routine_id=payload["routine_id"],
        exercise_logs=_entries(payload["exercise_logs"]),
        notes=payload["notes"],
        date=payload["date"],
    )
    log = LogService().log_workout(current_context(), dto)
    return json_response({"data": workout_schema.dump(log)}, status=201)


@workouts_bp.put("/<int:log_id>")
@require_role(ROLE_CLIENT)
@timing
def update_workout(log_id: int):
    """Replace the exercise logs and notes of an owned workout log."""

    payload = workout_update_schema.load(json_body())
    dto = WorkoutLogUpdateIn(
        log_id=log_id,
        exercise_logs=_entries(payload["exercise_logs"]),
        notes=payload["notes"],
        date=payload["date"],
    )
    log = LogService().update_workout_log(current_context(), dto)
    return json_response({"data": workout_schema.dump(log)})


@workouts_bp.delete("/<int:log_id>")
@require_role(ROLE_CLIENT)
@timing
def delete_workout(log_id: int):
    LogService().delete_workout_log(current_context(), log_id)
    return json_response({"data": {"id": log_id, "deleted": True}})


# -------------------------------- Meals ------------------------------------ #


@meals_bp.post("")
@require_role(ROLE_CLIENT)
@timing
def log_meal():
    """Log a meal's macros against one of the caller's enrollments."""

    payload = meal_create_schema.load(json_body())
    log = LogService().log_meal(current_context(), MealLogIn(**payload))
    return json_response({"data": meal_schema.dump(log)}, status=201)


@meals_bp.put("/<int:log_id>")
@require_role(ROLE_CLIENT)
@timing
def update_meal(log_id: int):
    payload = meal_update_schema.load(json_body())
    log = LogService().update_meal_log(current_context(), MealLogUpdateIn(log_id=log_id, **payload))
    return json_response({"data": meal_schema.dump(log)})


@meals_bp.delete("/<int:log_id>")
@require_role(ROLE_CLIENT)
@timing
def delete_meal(log_id: int):
    LogService().delete_meal_log(current_context(), log_id)
    return json_response({"data": {"id": log_id, "deleted": True}})
