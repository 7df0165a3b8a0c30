"""Public beta signup endpoint."""

from __future__ import annotations

from flask import Blueprint

from fitcoach.api.deps import json_body, json_response, timing
from fitcoach.schemas import BetaSignupOutSchema, BetaSignupSchema
from fitcoach.services.signups import BetaSignupIn, SignupService

bp = Blueprint("signups", __name__)

signup_schema = BetaSignupSchema()
signup_out_schema = BetaSignupOutSchema()


@bp.post("")
@timing
def beta_signup():
    """Record a lead; repeating an email returns the existing record with 200."""

    payload = signup_schema.load(json_body())
    signup = SignupService().signup(BetaSignupIn(**payload))
    status = 201 if signup.created else 200
    return json_response({"data": signup_out_schema.dump(signup)}, status=status)
