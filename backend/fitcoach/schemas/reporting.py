"""Dashboard and progress report schemas."""

from __future__ import annotations

from marshmallow import Schema, fields

from .enrollment import MealLogSchema, WorkoutLogSchema


class ClientStatsSchema(Schema):
    total_workouts = fields.Integer()
    average_calories = fields.Integer()
    progress_vs_30_days = fields.Integer()
    active_programs = fields.Integer()


class ClientDashboardSchema(Schema):
    stats = fields.Nested(ClientStatsSchema)
    recent_workouts = fields.List(fields.Nested(WorkoutLogSchema))
    recent_meals = fields.List(fields.Nested(MealLogSchema))


class WorkoutStatsSchema(Schema):
    total_workouts = fields.Integer()
    average_volume = fields.Float()
    last_week_volume = fields.Float()


class CaloriesPointSchema(Schema):
    date = fields.DateTime(allow_none=True)
    calories = fields.Integer()


class NutritionStatsSchema(Schema):
    total_meals = fields.Integer()
    average_calories = fields.Integer()
    average_protein = fields.Integer()
    calories_trend = fields.List(fields.Nested(CaloriesPointSchema))


class ProgressReportSchema(Schema):
    """Client ``/progress`` body: workout and nutrition stats plus recent logs."""

    workout = fields.Nested(WorkoutStatsSchema)
    nutrition = fields.Nested(NutritionStatsSchema)
    recent_workouts = fields.List(fields.Nested(WorkoutLogSchema))
    recent_meals = fields.List(fields.Nested(MealLogSchema))


class CoachClientSchema(Schema):
    client_id = fields.Integer()
    display_name = fields.String()
    enrollment_id = fields.Integer()
    program_id = fields.Integer()
    program_name = fields.String()
    program_type = fields.String()
    start_date = fields.DateTime(allow_none=True)
    workouts_logged = fields.Integer()
    progress_vs_cycle_length = fields.Integer()
    workout_frequency = fields.Float()
    last_workout = fields.String(allow_none=True)


class CoachStatsSchema(Schema):
    total_clients = fields.Integer()
    active_programs = fields.Integer()
    total_programs = fields.Integer()
    active_enrollments = fields.Integer()


class CoachDashboardSchema(Schema):
    clients = fields.List(fields.Nested(CoachClientSchema))
    stats = fields.Nested(CoachStatsSchema)
    program_types = fields.Dict(keys=fields.String(), values=fields.Integer())


class ClientHistorySchema(Schema):
    client_id = fields.Integer()
    display_name = fields.String()
    workouts = fields.List(fields.Nested(WorkoutLogSchema))
    meals = fields.List(fields.Nested(MealLogSchema))
