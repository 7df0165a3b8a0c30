"""Override resolution: enrollment customizations over the live program template."""

from __future__ import annotations

from fitcoach.models.base import as_utc
from fitcoach.models.enrollment import ClientProgram
from fitcoach.services.programs.payloads import (
    DietPayload,
    LiftingPayload,
    PosingPayload,
    RoutineSpec,
    meal_plans_from_data,
    posing_plan_from_data,
    routines_from_data,
    select_payload,
)

from .dto import EnrollmentOut, ProgressOut

CUSTOMIZABLE_FIELDS = ("name", "notes", "routines", "meal_plans", "posing_details")
STRUCTURAL_FIELDS = ("routines", "meal_plans", "posing_details")


def effective_routines(row: ClientProgram) -> tuple[RoutineSpec, ...]:
    """Routines the client trains on: the override if stored, else the template's."""
    custom = row.customizations
    if "routines" in custom:
        return routines_from_data(custom["routines"])
    payload = select_payload(row.program.type, row.program)
    return payload.routines if isinstance(payload, LiftingPayload) else ()


def progress_to_out(progress: dict) -> ProgressOut:
    return ProgressOut(
        completed=list(progress.get("completed") or []),
        notes=list(progress.get("notes") or []),
        last_workout=progress.get("last_workout"),
        streak=int(progress.get("streak") or 0),
    )


def enrollment_to_out(row: ClientProgram) -> EnrollmentOut:
    program = row.program
    custom = row.customizations
    payload = select_payload(program.type, program)

    routines = meal_plans = posing_details = None
    if isinstance(payload, LiftingPayload):
        routines = effective_routines(row)
    elif isinstance(payload, DietPayload):
        if "meal_plans" in custom:
            meal_plans = meal_plans_from_data(custom["meal_plans"])
        else:
            meal_plans = payload.meal_plans
    elif isinstance(payload, PosingPayload):
        if "posing_details" in custom:
            posing_details = posing_plan_from_data(custom["posing_details"])
        else:
            posing_details = payload.posing_plan

    return EnrollmentOut(
        id=row.id,
        client_id=row.client_id,
        program_id=row.program_id,
        program_type=program.type,
        coach_id=program.coach_id,
        active=bool(row.active),
        start_date=as_utc(row.start_date),
        version=int(row.version or 1),
        name=custom.get("name") or program.name,
        description=program.description,
        notes=custom.get("notes"),
        cycle_length=int(program.cycle_length or 0),
        progress=progress_to_out(row.progress),
        customized=[key for key in CUSTOMIZABLE_FIELDS if key in custom],
        routines=routines,
        meal_plans=meal_plans,
        posing_details=posing_details,
    )
