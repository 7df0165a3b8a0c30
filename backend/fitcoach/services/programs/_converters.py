from __future__ import annotations

from fitcoach.models.base import as_utc
from fitcoach.models.program import Program
from fitcoach.services._shared.base import display_name

from .dto import ProgramOut
from .payloads import DietPayload, LiftingPayload, PosingPayload, select_payload


def program_to_out(row: Program) -> ProgramOut:
    payload = select_payload(row.type, row)
    routines = meal_plans = posing_plan = None
    if isinstance(payload, LiftingPayload):
        routines = payload.routines
    elif isinstance(payload, DietPayload):
        meal_plans = payload.meal_plans
    elif isinstance(payload, PosingPayload):
        posing_plan = payload.posing_plan

    return ProgramOut(
        id=row.id,
        uuid=row.uuid,
        coach_id=row.coach_id,
        coach_name=display_name(row.coach, fallback="Unnamed Coach"),
        name=row.name,
        description=row.description,
        type=row.type,
        price=float(row.price or 0),
        is_public=bool(row.is_public),
        status=row.status,
        cycle_length=int(row.cycle_length or 0),
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
        etag=row.compute_etag(),
        routines=routines,
        meal_plans=meal_plans,
        posing_plan=posing_plan,
    )
