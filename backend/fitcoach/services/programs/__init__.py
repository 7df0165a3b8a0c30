"""Program authoring service, its DTOs and payload validators."""

from __future__ import annotations

from .dto import (
    ProgramCreateIn,
    ProgramDeleteOut,
    ProgramListIn,
    ProgramListOut,
    ProgramOut,
    ProgramUpdateIn,
)
from .payloads import (
    DietPayload,
    LiftingPayload,
    PosingPayload,
    select_payload,
    validate_meal_plan,
    validate_posing_plan,
    validate_routine,
)
from .service import ProgramService

__all__ = [
    "ProgramService",
    # DTOs
    "ProgramCreateIn",
    "ProgramDeleteOut",
    "ProgramListIn",
    "ProgramListOut",
    "ProgramOut",
    "ProgramUpdateIn",
    # Payloads
    "DietPayload",
    "LiftingPayload",
    "PosingPayload",
    "select_payload",
    "validate_meal_plan",
    "validate_posing_plan",
    "validate_routine",
]
