from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from fitcoach.services._shared.dto import PageMeta, PaginationIn

from .payloads import MealPlan, PosingPlan, RoutineSpec

# ------------------------------ Input DTOs ------------------------------- #


@dataclass(frozen=True, slots=True)
class ProgramCreateIn:
    """
    Program draft as submitted by a coach.

    The type-specific payloads arrive raw and are validated by the service,
    so that every failing field is reported in one error.
    """

    name: str
    type: str
    description: str | None = None
    price: float = 0
    is_public: bool = True
    status: str = "active"
    cycle_length: int | None = None
    workout_days: Any = None
    meal_plans: Any = None
    posing_plan: Any = None


@dataclass(frozen=True, slots=True)
class ProgramUpdateIn:
    """Partial update; ``None`` leaves a field unchanged."""

    program_id: int
    name: str | None = None
    description: str | None = None
    price: float | None = None
    is_public: bool | None = None
    status: str | None = None
    cycle_length: int | None = None
    type: str | None = None
    workout_days: Any = None
    meal_plans: Any = None
    posing_plan: Any = None
    if_match: str | None = None


@dataclass(frozen=True, slots=True)
class ProgramListIn(PaginationIn):
    """Marketplace listing filters."""

    type: str | None = None
    coach_id: int | None = None
    mine: bool = False


# ------------------------------ Output DTOs ------------------------------ #


@dataclass(frozen=True, slots=True)
class ProgramOut:
    """
    Program with exactly one populated payload.

    ``routines`` is set for lifting, ``meal_plans`` for diet and
    ``posing_plan`` for posing; the other two stay ``None``.
    """

    id: int
    uuid: str
    coach_id: int
    coach_name: str
    name: str
    description: str | None
    type: str
    price: float
    is_public: bool
    status: str
    cycle_length: int
    created_at: datetime | None
    updated_at: datetime | None
    etag: str
    routines: tuple[RoutineSpec, ...] | None = None
    meal_plans: tuple[MealPlan, ...] | None = None
    posing_plan: PosingPlan | None = None


@dataclass(frozen=True, slots=True)
class ProgramListOut:
    items: list[ProgramOut]
    meta: PageMeta


@dataclass(frozen=True, slots=True)
class ProgramDeleteOut:
    """Rows removed by the cascade, keyed by table."""

    program_id: int
    deleted: dict[str, int]
