from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from fitcoach.services.logs.dto import MealLogOut, WorkoutLogOut


@dataclass(frozen=True, slots=True)
class ReportingConfig:
    """
    :param progress_window: Fixed denominator of ``progress_vs_30_days``.
    :param recent_limit: Number of recent logs on dashboards.
    :param trend_limit: Number of meals in ``calories_trend``.
    """

    progress_window: int = 30
    recent_limit: int = 10
    trend_limit: int = 30


# ----------------------------- Client side ------------------------------- #


@dataclass(frozen=True, slots=True)
class ClientStatsOut:
    total_workouts: int
    average_calories: int
    progress_vs_30_days: int
    active_programs: int


@dataclass(frozen=True, slots=True)
class ClientDashboardOut:
    stats: ClientStatsOut
    recent_workouts: list[WorkoutLogOut]
    recent_meals: list[MealLogOut]


@dataclass(frozen=True, slots=True)
class WorkoutStatsOut:
    total_workouts: int
    average_volume: float
    last_week_volume: float


@dataclass(frozen=True, slots=True)
class CaloriesPointOut:
    date: datetime | None
    calories: int


@dataclass(frozen=True, slots=True)
class NutritionStatsOut:
    total_meals: int
    average_calories: int
    average_protein: int
    calories_trend: list[CaloriesPointOut]


@dataclass(frozen=True, slots=True)
class ProgressReportOut:
    workout: WorkoutStatsOut
    nutrition: NutritionStatsOut
    recent_workouts: list[WorkoutLogOut]
    recent_meals: list[MealLogOut]


# ------------------------------ Coach side ------------------------------- #


@dataclass(frozen=True, slots=True)
class CoachClientOut:
    """One active enrollment in one of the coach's programs."""

    client_id: int
    display_name: str
    enrollment_id: int
    program_id: int
    program_name: str
    program_type: str
    start_date: datetime | None
    workouts_logged: int
    progress_vs_cycle_length: int
    workout_frequency: float
    last_workout: str | None


@dataclass(frozen=True, slots=True)
class CoachStatsOut:
    total_clients: int
    active_programs: int
    total_programs: int
    active_enrollments: int


@dataclass(frozen=True, slots=True)
class CoachDashboardOut:
    clients: list[CoachClientOut]
    stats: CoachStatsOut
    program_types: dict[str, int]


@dataclass(frozen=True, slots=True)
class ClientHistoryOut:
    client_id: int
    display_name: str
    workouts: list[WorkoutLogOut]
    meals: list[MealLogOut]
