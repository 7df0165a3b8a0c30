"""Client-side enrollment endpoints (``/client/programs``)."""

from __future__ import annotations

from flask import Blueprint, request

from fitcoach.api.deps import current_context, json_body, json_response, require_auth, timing
from fitcoach.schemas import EnrollmentPatchSchema, EnrollmentSchema, MealLogSchema, WorkoutLogSchema
from fitcoach.services.enrollments import CustomizationIn, EnrollmentService
from fitcoach.services.logs import LogService

bp = Blueprint("enrollments", __name__)

enrollment_schema = EnrollmentSchema()
enrollment_list_schema = EnrollmentSchema(many=True)
enrollment_patch_schema = EnrollmentPatchSchema()
workout_list_schema = WorkoutLogSchema(many=True)
meal_list_schema = MealLogSchema(many=True)


@bp.get("")
@require_auth
@timing
def list_enrollments():
    """List the caller's enrollments; ``?active=true`` keeps only active ones."""

    active_only = request.args.get("active", "").lower() in {"1", "true", "yes"}
    items = EnrollmentService().list(current_context(), active_only=active_only)
    return json_response({"data": enrollment_list_schema.dump(items)})


@bp.get("/<int:enrollment_id>")
@require_auth
@timing
def get_enrollment(enrollment_id: int):
    """Return one enrollment with customizations resolved over the template."""

    enrollment = EnrollmentService().get(current_context(), enrollment_id)
    return json_response({"data": enrollment_schema.dump(enrollment)})


@bp.patch("/<int:enrollment_id>")
@require_auth
@timing
def patch_enrollment(enrollment_id: int):
    """Toggle ``active`` and/or store customizations."""

    payload = enrollment_patch_schema.load(json_body())
    ctx = current_context()
    service = EnrollmentService()
    enrollment = None
    if "customizations" in payload or payload.get("clear"):
        enrollment = service.customize(
            ctx,
            CustomizationIn(
                enrollment_id=enrollment_id,
                overrides=payload.get("customizations") or {},
                clear=tuple(payload.get("clear") or ()),
            ),
        )
    if "active" in payload:
        enrollment = service.set_active(ctx, enrollment_id, payload["active"])
    if enrollment is None:
        enrollment = service.get(ctx, enrollment_id)
    return json_response({"data": enrollment_schema.dump(enrollment)})


@bp.get("/<int:enrollment_id>/workouts")
@require_auth
@timing
def workout_history(enrollment_id: int):
    """Workout logs of an owned enrollment, newest first."""

    logs = LogService().workout_history(current_context(), enrollment_id)
    return json_response({"data": workout_list_schema.dump(logs)})


@bp.get("/<int:enrollment_id>/meals")
@require_auth
@timing
def meal_history(enrollment_id: int):
    """Meal logs of an owned enrollment, newest first."""

    logs = LogService().meal_history(current_context(), enrollment_id)
    return json_response({"data": meal_list_schema.dump(logs)})
