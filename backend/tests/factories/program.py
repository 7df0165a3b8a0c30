"""Factories for programs, routines and exercises."""

from __future__ import annotations

import factory

from fitcoach.models.program import Program, ProgramExercise, Routine
from tests.factories import BaseFactory
from tests.factories.user import CoachFactory


class ProgramFactory(BaseFactory):
    """A public, active lifting program without routines."""

    class Meta:
        model = Program

    coach = factory.SubFactory(CoachFactory)
    name = factory.Sequence(lambda n: f"Program {n}")
    description = factory.Faker("sentence")
    type = "lifting"
    price = 19.99
    is_public = True
    status = "active"
    cycle_length = 0
    program_data = None


class DietProgramFactory(ProgramFactory):
    type = "diet"
    program_data = factory.LazyFunction(
        lambda: {
            "schema_version": 1,
            "meal_plans": [
                {
                    "meal_name": "Breakfast",
                    "target_calories": 500,
                    "target_protein": 30,
                    "target_carbs": 50,
                    "target_fats": 15,
                    "notes": "Before training",
                    "food_suggestions": ["oats"],
                }
            ],
        }
    )


class PosingProgramFactory(ProgramFactory):
    type = "posing"
    program_data = factory.LazyFunction(
        lambda: {
            "schema_version": 1,
            "posing_plan": {
                "bio": "Pro judge",
                "details": "Front double biceps drills",
                "communication_preference": "chat",
            },
        }
    )


class RoutineFactory(BaseFactory):
    class Meta:
        model = Routine

    program = factory.SubFactory(ProgramFactory)
    name = factory.Sequence(lambda n: f"Day {n}")
    day_of_week = "monday"
    order_in_cycle = factory.Sequence(lambda n: n + 1)
    notes = None


class ProgramExerciseFactory(BaseFactory):
    class Meta:
        model = ProgramExercise

    routine = factory.SubFactory(RoutineFactory)
    name = factory.Sequence(lambda n: f"Exercise {n}")
    description = None
    sets = 3
    reps = "8-12"
    rest_time = "90"
    notes = None
    order_in_routine = factory.Sequence(lambda n: n + 1)
