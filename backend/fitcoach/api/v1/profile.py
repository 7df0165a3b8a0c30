"""Profile endpoints for the authenticated user."""

from __future__ import annotations

from flask import Blueprint

from fitcoach.api.deps import current_context, json_body, json_response, require_auth, timing
from fitcoach.schemas import ProfileUpdateSchema, UserSchema
from fitcoach.services.profiles import ProfileService, ProfileUpdateIn

bp = Blueprint("profile", __name__)

user_schema = UserSchema()
profile_update_schema = ProfileUpdateSchema()


@bp.get("")
@require_auth
@timing
def get_profile():
    user = ProfileService().get(current_context())
    return json_response({"data": user_schema.dump(user)})


@bp.patch("")
@require_auth
@timing
def update_profile():
    """Update shared user fields and the role-specific ``profile`` block."""

    payload = profile_update_schema.load(json_body())
    profile_fields = payload.pop("profile", {}) or {}
    user = ProfileService().update(
        current_context(),
        ProfileUpdateIn(user_fields=payload, profile_fields=profile_fields),
    )
    return json_response({"data": user_schema.dump(user)})
