"""Idempotent demo data for local development environments."""

from __future__ import annotations

import logging
from typing import Any

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import select

from fitcoach.models.enrollment import ClientProgram
from fitcoach.models.program import Program
from fitcoach.models.user import ROLE_CLIENT, ROLE_COACH, User
from fitcoach.repositories.user import UserRepository
from fitcoach.services._shared.base import ServiceContext
from fitcoach.services.enrollments import EnrollmentService
from fitcoach.services.logs import ExerciseEntryIn, LogService, MealLogIn, SetIn, WorkoutLogIn
from fitcoach.services.programs import ProgramCreateIn, ProgramService

LOGGER = logging.getLogger(__name__)

Summary = dict[str, dict[str, int]]

USER_FIXTURES: list[dict[str, Any]] = [
    {
        "username": "coachdan",
        "email": "coach.dan@example.com",
        "full_name": "Coach Dan",
        "password": "coachPower!",
        "role": ROLE_COACH,
        "profile": {"bio": "Strength and physique coach.", "specialties": "powerlifting"},
    },
    {
        "username": "alexm",
        "email": "alex.martinez@example.com",
        "full_name": "Alex Martinez",
        "password": "devPass123!",
        "role": ROLE_CLIENT,
        "profile": {"height_cm": 178, "weight_kg": 82.5, "fitness_goals": "Build strength"},
    },
    {
        "username": "jamielee",
        "email": "jamie.lee@example.com",
        "full_name": "Jamie Lee",
        "password": "strongPass123",
        "role": ROLE_CLIENT,
        "profile": {"dietary_restrictions": "vegetarian"},
    },
]

PROGRAM_FIXTURES: list[dict[str, Any]] = [
    {
        "name": "Upper/Lower Strength",
        "type": "lifting",
        "description": "Four-day upper/lower split.",
        "price": 49.0,
        "workout_days": [
            {
                "name": "Upper A",
                "day_of_week": "monday",
                "exercises": [
                    {"name": "Bench Press", "sets": 4, "reps": "6-8", "rest_time": "120"},
                    {"name": "Barbell Row", "sets": 4, "reps": "8-10", "rest_time": "90"},
                ],
            },
            {
                "name": "Lower A",
                "day_of_week": "tuesday",
                "exercises": [
                    {"name": "Back Squat", "sets": 5, "reps": "5", "rest_time": "180"},
                    {"name": "Romanian Deadlift", "sets": 3, "reps": "10"},
                ],
            },
        ],
    },
    {
        "name": "Lean Cut Nutrition",
        "type": "diet",
        "description": "Moderate deficit with high protein.",
        "price": 29.0,
        "meal_plans": [
            {
                "meal_name": "Breakfast",
                "target_calories": 450,
                "target_protein": 35,
                "target_carbs": 40,
                "target_fats": 15,
                "notes": "Eat within an hour of waking.",
                "food_suggestions": ["oats", "egg whites", "berries"],
            },
            {
                "meal_name": "Dinner",
                "target_calories": 650,
                "target_protein": 50,
                "target_carbs": 60,
                "target_fats": 20,
                "notes": "Keep sodium moderate.",
                "food_suggestions": ["chicken breast", "rice", "broccoli"],
            },
        ],
    },
    {
        "name": "Stage Ready Posing",
        "type": "posing",
        "description": "Mandatory poses and transitions.",
        "price": 79.0,
        "posing_plan": {
            "bio": "Former classic physique competitor.",
            "details": "Weekly video review of quarter turns.",
            "communication_preference": "video",
        },
    },
]


def _touch(summary: Summary, table: str, created: bool) -> None:
    counters = summary.setdefault(table, {"created": 0, "existing": 0})
    counters["created" if created else "existing"] += 1


def seed_users(database: SQLAlchemy, *, verbose: bool = False) -> Summary:
    """Create the demo coach and clients with their role profiles."""
    session = database.session
    users = UserRepository(session=session)
    summary: Summary = {}
    for fixture in USER_FIXTURES:
        existing = users.get_by_username(fixture["username"])
        if existing is not None:
            _touch(summary, "users", created=False)
            continue
        user = User(
            username=fixture["username"],
            email=fixture["email"],
            full_name=fixture["full_name"],
            role=fixture["role"],
        )
        user.password = fixture["password"]
        users.create_with_profile(user, dict(fixture["profile"]))
        _touch(summary, "users", created=True)
        if verbose:
            LOGGER.info("Seeded user", extra={"username": user.username, "role": user.role})
    session.commit()
    return summary


def seed_programs(database: SQLAlchemy, *, verbose: bool = False) -> Summary:
    """Create one program of each type for the demo coach."""
    session = database.session
    coach = UserRepository(session=session).get_by_username("coachdan")
    summary: Summary = {}
    if coach is None:
        return summary
    ctx = ServiceContext(actor_id=coach.id, role=ROLE_COACH, request_id="seed")
    service = ProgramService()
    for fixture in PROGRAM_FIXTURES:
        stmt = select(Program.id).where(Program.coach_id == coach.id, Program.name == fixture["name"])
        if session.execute(stmt).first() is not None:
            _touch(summary, "programs", created=False)
            continue
        program = service.create(ctx, ProgramCreateIn(**fixture))
        _touch(summary, "programs", created=True)
        if verbose:
            LOGGER.info("Seeded program", extra={"program_id": program.id, "type": program.type})
    return summary


def seed_enrollments(database: SQLAlchemy, *, verbose: bool = False) -> Summary:
    """Enroll the first client in every demo program and log a first session."""
    session = database.session
    client = UserRepository(session=session).get_by_username("alexm")
    summary: Summary = {}
    if client is None:
        return summary
    ctx = ServiceContext(actor_id=client.id, role=ROLE_CLIENT, request_id="seed")
    enrollments = EnrollmentService()
    logs = LogService()
    programs = session.execute(select(Program).order_by(Program.id)).scalars().all()
    for program in programs:
        stmt = select(ClientProgram.id).where(
            ClientProgram.client_id == client.id,
            ClientProgram.program_id == program.id,
        )
        if session.execute(stmt).first() is not None:
            _touch(summary, "client_programs", created=False)
            continue
        enrollment = enrollments.enroll(ctx, program.id)
        _touch(summary, "client_programs", created=True)
        if enrollment.routines:
            routine = enrollment.routines[0]
            logs.log_workout(
                ctx,
                WorkoutLogIn(
                    enrollment_id=enrollment.id,
                    routine_id=routine.id,
                    exercise_logs=tuple(
                        ExerciseEntryIn(
                            exercise_id=exercise.id,
                            sets=(SetIn(reps=8, weight=60.0), SetIn(reps=8, weight=62.5)),
                        )
                        for exercise in routine.exercises
                    ),
                    notes="First session.",
                ),
            )
            _touch(summary, "workout_logs", created=True)
        if enrollment.meal_plans:
            logs.log_meal(
                ctx,
                MealLogIn(enrollment_id=enrollment.id, calories=520, protein=38, carbs=45, fats=16),
            )
            _touch(summary, "meal_logs", created=True)
        if verbose:
            LOGGER.info("Seeded enrollment", extra={"enrollment_id": enrollment.id})
    return summary


def run_all(database: SQLAlchemy, *, verbose: bool = False) -> Summary:
    """Run all seeders in foreign-key order."""
    if verbose:
        LOGGER.info("Running full seed pipeline...")
    combined: Summary = {}
    for func in (seed_users, seed_programs, seed_enrollments):
        result = func(database, verbose=verbose)
        for table, counters in result.items():
            entry = combined.setdefault(table, {"created": 0, "existing": 0})
            entry["created"] += counters.get("created", 0)
            entry["existing"] += counters.get("existing", 0)
    return combined


__all__ = ["run_all", "seed_enrollments", "seed_programs", "seed_users"]
