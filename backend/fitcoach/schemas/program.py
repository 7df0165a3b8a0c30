"""Program resource schemas.

Type-specific payloads (``workout_days``, ``meal_plans``, ``posing_plan``) are
accepted as raw JSON here and validated by the program service, which reports
every failing field at once.
"""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, fields, post_dump, validate

from fitcoach.models.program import PROGRAM_STATUSES, PROGRAM_TYPES


class ProgramCreateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.String(required=True, validate=validate.Length(min=1, max=160))
    type = fields.String(required=True)
    description = fields.String(load_default=None, allow_none=True)
    price = fields.Float(load_default=0)
    is_public = fields.Boolean(load_default=True)
    status = fields.String(load_default="active")
    cycle_length = fields.Integer(load_default=None, allow_none=True)
    workout_days = fields.Raw(load_default=None, allow_none=True)
    meal_plans = fields.Raw(load_default=None, allow_none=True)
    posing_plan = fields.Raw(load_default=None, allow_none=True)


class ProgramUpdateSchema(Schema):
    """Partial update; absent keys stay unchanged."""

    class Meta:
        unknown = EXCLUDE

    name = fields.String(validate=validate.Length(min=1, max=160))
    type = fields.String()
    description = fields.String(allow_none=True)
    price = fields.Float()
    is_public = fields.Boolean()
    status = fields.String(validate=validate.OneOf(PROGRAM_STATUSES))
    cycle_length = fields.Integer()
    workout_days = fields.Raw(allow_none=True)
    meal_plans = fields.Raw(allow_none=True)
    posing_plan = fields.Raw(allow_none=True)


class ProgramListQuerySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    type = fields.String(load_default=None, validate=validate.OneOf(PROGRAM_TYPES))
    coach_id = fields.Integer(load_default=None)
    mine = fields.Boolean(load_default=False)


# ------------------------------ Output ------------------------------------ #


class ExerciseSchema(Schema):
    id = fields.Raw()
    name = fields.String()
    description = fields.String(allow_none=True)
    sets = fields.Integer()
    reps = fields.String()
    rest_time = fields.String(allow_none=True)
    notes = fields.String(allow_none=True)
    order_in_routine = fields.Integer()


class RoutineSchema(Schema):
    id = fields.Raw()
    name = fields.String()
    day_of_week = fields.String(allow_none=True)
    order_in_cycle = fields.Integer()
    notes = fields.String(allow_none=True)
    exercises = fields.List(fields.Nested(ExerciseSchema))


class MealPlanSchema(Schema):
    meal_name = fields.String()
    target_calories = fields.Float()
    target_protein = fields.Float()
    target_carbs = fields.Float()
    target_fats = fields.Float()
    notes = fields.String()
    food_suggestions = fields.List(fields.String())


class PosingPlanSchema(Schema):
    bio = fields.String()
    details = fields.String()
    communication_preference = fields.String()


PAYLOAD_KEYS = ("routines", "meal_plans", "posing_plan", "posing_details")


def drop_inactive_payloads(data: dict[str, Any]) -> dict[str, Any]:
    """Remove payload keys that do not apply to the resource's program type."""
    for key in PAYLOAD_KEYS:
        if key in data and data[key] is None:
            del data[key]
    return data


class ProgramSchema(Schema):
    """Public program; only the payload selected by ``type`` is present."""

    id = fields.Integer()
    uuid = fields.String()
    coach_id = fields.Integer()
    coach_name = fields.String()
    name = fields.String()
    description = fields.String(allow_none=True)
    type = fields.String()
    price = fields.Float()
    is_public = fields.Boolean()
    status = fields.String()
    cycle_length = fields.Integer()
    created_at = fields.DateTime(allow_none=True)
    updated_at = fields.DateTime(allow_none=True)
    routines = fields.List(fields.Nested(RoutineSchema), allow_none=True)
    meal_plans = fields.List(fields.Nested(MealPlanSchema), allow_none=True)
    posing_plan = fields.Nested(PosingPlanSchema, allow_none=True)

    @post_dump
    def _drop_inactive(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        return drop_inactive_payloads(data)
