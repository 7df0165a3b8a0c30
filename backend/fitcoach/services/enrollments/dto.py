from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from fitcoach.services.programs.payloads import MealPlan, PosingPlan, RoutineSpec

# ------------------------------ Input DTOs ------------------------------- #


@dataclass(frozen=True, slots=True)
class CustomizationIn:
    """
    Overrides applied to one enrollment.

    ``overrides`` holds only the keys the caller sent (``name``, ``notes``,
    ``routines``, ``meal_plans``, ``posing_details``); ``clear`` names
    overrides to drop so the template value shows through again.
    """

    enrollment_id: int
    overrides: dict[str, Any] = field(default_factory=dict)
    clear: tuple[str, ...] = ()


# ------------------------------ Output DTOs ------------------------------ #


@dataclass(frozen=True, slots=True)
class ProgressOut:
    completed: list[str]
    notes: list[dict[str, Any]]
    last_workout: str | None
    streak: int


@dataclass(frozen=True, slots=True)
class EnrollmentOut:
    """
    Enrollment with template fields resolved through its overrides.

    Each of ``name``, ``routines``, ``meal_plans`` and ``posing_details`` falls
    back to the program independently; ``customized`` lists the overridden ones.
    """

    id: int
    client_id: int
    program_id: int
    program_type: str
    coach_id: int
    active: bool
    start_date: datetime | None
    version: int
    name: str
    description: str | None
    notes: str | None
    cycle_length: int
    progress: ProgressOut
    customized: list[str]
    routines: tuple[RoutineSpec, ...] | None = None
    meal_plans: tuple[MealPlan, ...] | None = None
    posing_details: PosingPlan | None = None
