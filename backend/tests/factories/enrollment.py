"""Factories for enrollments and the logs hanging off them."""

from __future__ import annotations

from datetime import UTC, datetime

import factory

from fitcoach.models.enrollment import ClientProgram, empty_enrollment_data
from fitcoach.models.logs import MealLog, WorkoutLog
from fitcoach.models.signup import BetaSignup
from tests.factories import BaseFactory
from tests.factories.program import ProgramFactory
from tests.factories.user import ClientFactory


class ClientProgramFactory(BaseFactory):
    class Meta:
        model = ClientProgram

    client = factory.SubFactory(ClientFactory)
    program = factory.SubFactory(ProgramFactory)
    active = True
    start_date = factory.LazyFunction(lambda: datetime.now(UTC))
    version = 1
    client_program_data = factory.LazyFunction(empty_enrollment_data)


class WorkoutLogFactory(BaseFactory):
    class Meta:
        model = WorkoutLog

    class Params:
        enrollment = factory.SubFactory(ClientProgramFactory)

    client_id = factory.SelfAttribute("enrollment.client_id")
    client_program_id = factory.SelfAttribute("enrollment.id")
    routine_id = "1"
    date = factory.LazyFunction(lambda: datetime.now(UTC))
    data = factory.LazyFunction(
        lambda: {
            "schema_version": 1,
            "routine_name": "Day 1",
            "exercise_logs": [
                {
                    "exercise_id": 1,
                    "exercise_name": "Bench Press",
                    "sets": [{"weight": 100, "reps": 5}],
                }
            ],
            "notes": None,
        }
    )


class MealLogFactory(BaseFactory):
    class Meta:
        model = MealLog

    class Params:
        enrollment = factory.SubFactory(ClientProgramFactory)

    client_id = factory.SelfAttribute("enrollment.client_id")
    client_program_id = factory.SelfAttribute("enrollment.id")
    calories = 500
    protein = 30
    carbs = 50
    fats = 15
    date = factory.LazyFunction(lambda: datetime.now(UTC))
    data = factory.LazyFunction(lambda: {"notes": None})


class BetaSignupFactory(BaseFactory):
    class Meta:
        model = BetaSignup

    first_name = factory.Faker("first_name")
    last_name = factory.Faker("last_name")
    email = factory.Sequence(lambda n: f"lead{n}@example.com")
