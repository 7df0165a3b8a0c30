from __future__ import annotations

import copy
import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from fitcoach.models.enrollment import ClientProgram
from fitcoach.models.logs import MealLog, WorkoutLog
from fitcoach.services._shared.base import BaseService, ServiceContext, round_half_up
from fitcoach.services._shared.errors import NotFoundError, ValidationFailedError
from fitcoach.services.enrollments import effective_routines
from fitcoach.services.programs.payloads import RoutineSpec

from ._converters import meal_log_to_out, workout_log_to_out
from .dto import (
    ExerciseEntryIn,
    MealLogIn,
    MealLogOut,
    MealLogUpdateIn,
    WorkoutLogIn,
    WorkoutLogOut,
    WorkoutLogUpdateIn,
)
from .progress import fold_workout

logger = logging.getLogger(__name__)

UNKNOWN_EXERCISE = "Unknown Exercise"
LOG_SCHEMA_VERSION = 1
MAX_MACRO = 100_000
MACRO_FIELDS = ("calories", "protein", "carbs", "fats")


def _find_routine(routines: Iterable[RoutineSpec], routine_id: int | str) -> RoutineSpec | None:
    wanted = str(routine_id)
    return next((r for r in routines if str(r.id) == wanted), None)


def _macros(dto: MealLogIn | MealLogUpdateIn) -> dict[str, int]:
    """Round each macro half-up; values outside ``0..MAX_MACRO`` are rejected."""
    errors: dict[str, list[str]] = {}
    out: dict[str, int] = {}
    for name in MACRO_FIELDS:
        value = getattr(dto, name) or 0
        if not 0 <= value <= MAX_MACRO:
            errors[name] = [f"Must be between 0 and {MAX_MACRO}."]
            continue
        out[name] = int(round_half_up(value))
    if errors:
        raise ValidationFailedError(errors)
    return out


class LogService(BaseService):
    """
    Workout and meal logging scoped to the caller's own enrollments.

    A workout write validates ownership, then the routine reference, bakes
    routine and exercise names into the log, stores it and folds it into the
    enrollment progress, all in one transaction.
    """

    # ------------------------------------------------------------------ #
    # Workouts
    # ------------------------------------------------------------------ #

    def log_workout(self, ctx: ServiceContext, dto: WorkoutLogIn) -> WorkoutLogOut:
        """
        :raises NotFoundError: If the enrollment is not the caller's, or the
            routine is not part of its effective routine set.
        """
        with self.rw_uow() as uow:
            enrollment = self._owned_enrollment(uow, ctx, dto.enrollment_id, for_update=True)
            routine = _find_routine(effective_routines(enrollment), dto.routine_id)
            if routine is None:
                raise NotFoundError("Routine", dto.routine_id)

            at = dto.date or datetime.now(UTC)
            log = WorkoutLog(
                client_id=ctx.actor_id,
                client_program_id=enrollment.id,
                routine_id=str(routine.id),
                date=at,
                data={
                    "schema_version": LOG_SCHEMA_VERSION,
                    "routine_name": routine.name,
                    "exercise_logs": self._denormalize(dto.exercise_logs, routine, previous=None),
                    "notes": dto.notes,
                },
            )
            uow.workout_logs.add(log)

            data = copy.deepcopy(enrollment.client_program_data or {})
            data["progress"] = fold_workout(
                data.get("progress"), routine_id=routine.id, at=at, note=dto.notes
            )
            enrollment.client_program_data = data
            uow.enrollments.flush()

            logger.info(
                "Workout logged",
                extra={
                    "workout_log_id": log.id,
                    "enrollment_id": enrollment.id,
                    "routine_id": log.routine_id,
                    "entries": len(dto.exercise_logs),
                },
            )
            return workout_log_to_out(log)

    def update_workout_log(self, ctx: ServiceContext, dto: WorkoutLogUpdateIn) -> WorkoutLogOut:
        """
        Replace a workout log's entries and notes wholesale.

        Exercise names are looked up again in the current routine; ids no
        longer present keep the name stored before, or the sentinel.
        """
        with self.rw_uow() as uow:
            log = uow.workout_logs.get_owned(dto.log_id, ctx.actor_id)
            if log is None:
                raise NotFoundError("WorkoutLog", dto.log_id)

            old = dict(log.data or {})
            enrollment = uow.enrollments.get(log.client_program_id)
            routine = (
                _find_routine(effective_routines(enrollment), log.routine_id)
                if enrollment is not None
                else None
            )
            log.data = {
                "schema_version": LOG_SCHEMA_VERSION,
                "routine_name": old.get("routine_name") or (routine.name if routine else ""),
                "exercise_logs": self._denormalize(
                    dto.exercise_logs, routine, previous=old.get("exercise_logs")
                ),
                "notes": dto.notes,
            }
            if dto.date is not None:
                log.date = dto.date
            uow.workout_logs.flush()

            logger.info("Workout log updated", extra={"workout_log_id": log.id})
            return workout_log_to_out(log)

    def delete_workout_log(self, ctx: ServiceContext, log_id: int) -> None:
        """Hard delete; the routine stays credited in ``progress.completed``."""
        with self.rw_uow() as uow:
            log = uow.workout_logs.get_owned(log_id, ctx.actor_id)
            if log is None:
                raise NotFoundError("WorkoutLog", log_id)
            uow.workout_logs.delete(log)
            logger.info("Workout log deleted", extra={"workout_log_id": log_id})

    def workout_history(self, ctx: ServiceContext, enrollment_id: int) -> list[WorkoutLogOut]:
        """
        Newest-first workouts of one of the caller's enrollments.

        :raises NotFoundError: If the enrollment belongs to someone else.
        """
        with self.ro_uow() as uow:
            self._owned_enrollment(uow, ctx, enrollment_id)
            rows = uow.workout_logs.history(ctx.actor_id, enrollment_id)
            return [workout_log_to_out(row) for row in rows]

    # ------------------------------------------------------------------ #
    # Meals
    # ------------------------------------------------------------------ #

    def log_meal(self, ctx: ServiceContext, dto: MealLogIn) -> MealLogOut:
        """:raises NotFoundError: If the enrollment is not the caller's."""
        with self.rw_uow() as uow:
            enrollment = self._owned_enrollment(uow, ctx, dto.enrollment_id)
            log = MealLog(
                client_id=ctx.actor_id,
                client_program_id=enrollment.id,
                **_macros(dto),
                date=dto.date or datetime.now(UTC),
                data={"schema_version": LOG_SCHEMA_VERSION, "notes": dto.notes},
            )
            uow.meal_logs.add(log)
            logger.info(
                "Meal logged", extra={"meal_log_id": log.id, "enrollment_id": enrollment.id}
            )
            return meal_log_to_out(log)

    def update_meal_log(self, ctx: ServiceContext, dto: MealLogUpdateIn) -> MealLogOut:
        """Replace macros and notes wholesale; omitted macros become 0."""
        with self.rw_uow() as uow:
            log = uow.meal_logs.get_owned(dto.log_id, ctx.actor_id)
            if log is None:
                raise NotFoundError("MealLog", dto.log_id)
            updates: dict[str, Any] = {
                **_macros(dto),
                "data": {"schema_version": LOG_SCHEMA_VERSION, "notes": dto.notes},
            }
            uow.meal_logs.assign_updates(log, updates)
            if dto.date is not None:
                log.date = dto.date
                uow.meal_logs.flush()
            logger.info("Meal log updated", extra={"meal_log_id": log.id})
            return meal_log_to_out(log)

    def delete_meal_log(self, ctx: ServiceContext, log_id: int) -> None:
        with self.rw_uow() as uow:
            log = uow.meal_logs.get_owned(log_id, ctx.actor_id)
            if log is None:
                raise NotFoundError("MealLog", log_id)
            uow.meal_logs.delete(log)
            logger.info("Meal log deleted", extra={"meal_log_id": log_id})

    def meal_history(self, ctx: ServiceContext, enrollment_id: int) -> list[MealLogOut]:
        """:raises NotFoundError: If the enrollment belongs to someone else."""
        with self.ro_uow() as uow:
            self._owned_enrollment(uow, ctx, enrollment_id)
            rows = uow.meal_logs.history(ctx.actor_id, enrollment_id)
            return [meal_log_to_out(row) for row in rows]

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _owned_enrollment(
        uow, ctx: ServiceContext, enrollment_id: int, *, for_update: bool = False
    ) -> ClientProgram:
        repo = uow.enrollments
        lookup = repo.get_owned_for_update if for_update else repo.get_owned
        enrollment = lookup(enrollment_id, ctx.actor_id)
        if enrollment is None:
            raise NotFoundError("Enrollment", enrollment_id)
        return enrollment

    @staticmethod
    def _denormalize(
        entries: Iterable[ExerciseEntryIn],
        routine: RoutineSpec | None,
        *,
        previous: list[dict[str, Any]] | None,
    ) -> list[dict[str, Any]]:
        """Attach ``exercise_name`` to each entry; never rejects unknown ids."""
        known_names = {
            str(item.get("exercise_id")): item.get("exercise_name")
            for item in previous or []
            if item.get("exercise_name")
        }
        out: list[dict[str, Any]] = []
        for entry in entries:
            exercise = routine.find_exercise(entry.exercise_id) if routine else None
            if exercise is not None:
                name = exercise.name
            else:
                name = known_names.get(str(entry.exercise_id), UNKNOWN_EXERCISE)
            out.append(
                {
                    "exercise_id": entry.exercise_id,
                    "exercise_name": name,
                    "sets": [{"weight": s.weight, "reps": s.reps} for s in entry.sets],
                }
            )
        return out
