"""Enrollment and log schemas."""

from __future__ import annotations

from datetime import UTC
from typing import Any

from marshmallow import EXCLUDE, Schema, fields, post_dump, validate

from fitcoach.services.logs import MAX_MACRO
from fitcoach.services.programs.payloads import Identifier, StrictNumber

from .program import MealPlanSchema, PosingPlanSchema, RoutineSchema, drop_inactive_payloads

# ------------------------------ Enrollments -------------------------------- #


class EnrollmentPatchSchema(Schema):
    """
    ``active`` toggles the enrollment; ``customizations`` stores overrides and
    ``clear`` drops overrides by name.
    """

    class Meta:
        unknown = EXCLUDE

    active = fields.Boolean()
    customizations = fields.Dict(keys=fields.String())
    clear = fields.List(fields.String(), load_default=list)


class ProgressSchema(Schema):
    completed = fields.List(fields.String())
    notes = fields.List(fields.Dict())
    last_workout = fields.String(allow_none=True)
    streak = fields.Integer()


class EnrollmentSchema(Schema):
    id = fields.Integer()
    client_id = fields.Integer()
    program_id = fields.Integer()
    program_type = fields.String()
    coach_id = fields.Integer()
    active = fields.Boolean()
    start_date = fields.DateTime(allow_none=True)
    version = fields.Integer()
    name = fields.String()
    description = fields.String(allow_none=True)
    notes = fields.String(allow_none=True)
    cycle_length = fields.Integer()
    progress = fields.Nested(ProgressSchema)
    customized = fields.List(fields.String())
    routines = fields.List(fields.Nested(RoutineSchema), allow_none=True)
    meal_plans = fields.List(fields.Nested(MealPlanSchema), allow_none=True)
    posing_details = fields.Nested(PosingPlanSchema, allow_none=True)

    @post_dump
    def _drop_inactive(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        return drop_inactive_payloads(data)


# --------------------------------- Logs ------------------------------------ #


class SetSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    reps = StrictNumber(required=True, validate=validate.Range(min=0))
    weight = StrictNumber(load_default=None, allow_none=True, validate=validate.Range(min=0))


class ExerciseEntrySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    exercise_id = Identifier(required=True)
    sets = fields.List(fields.Nested(SetSchema), load_default=list)


class WorkoutLogCreateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    enrollment_id = fields.Integer(required=True)
    routine_id = Identifier(required=True)
    exercise_logs = fields.List(fields.Nested(ExerciseEntrySchema), load_default=list)
    notes = fields.String(load_default=None, allow_none=True)
    date = fields.AwareDateTime(load_default=None, allow_none=True, default_timezone=UTC)


class WorkoutLogUpdateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    exercise_logs = fields.List(fields.Nested(ExerciseEntrySchema), load_default=list)
    notes = fields.String(load_default=None, allow_none=True)
    date = fields.AwareDateTime(load_default=None, allow_none=True, default_timezone=UTC)


MACRO_RANGE = validate.Range(min=0, max=MAX_MACRO)


class MealLogUpdateSchema(Schema):
    """Wholesale replacement; macros default to 0 when omitted."""

    class Meta:
        unknown = EXCLUDE

    calories = StrictNumber(load_default=0, validate=MACRO_RANGE)
    protein = StrictNumber(load_default=0, validate=MACRO_RANGE)
    carbs = StrictNumber(load_default=0, validate=MACRO_RANGE)
    fats = StrictNumber(load_default=0, validate=MACRO_RANGE)
    notes = fields.String(load_default=None, allow_none=True)
    date = fields.AwareDateTime(load_default=None, allow_none=True, default_timezone=UTC)


class WorkoutLogSchema(Schema):
    id = fields.Integer()
    client_id = fields.Integer()
    enrollment_id = fields.Integer()
    routine_id = fields.String()
    routine_name = fields.String()
    date = fields.DateTime(allow_none=True)
    exercise_logs = fields.List(fields.Dict())
    notes = fields.String(allow_none=True)


class MealLogSchema(Schema):
    id = fields.Integer()
    client_id = fields.Integer()
    enrollment_id = fields.Integer()
    calories = fields.Integer()
    protein = fields.Integer()
    carbs = fields.Integer()
    fats = fields.Integer()
    date = fields.DateTime(allow_none=True)
    notes = fields.String(allow_none=True)


class MealLogCreateSchema(MealLogUpdateSchema):
    enrollment_id = fields.Integer(required=True)
