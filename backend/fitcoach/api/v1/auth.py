"""Authentication endpoints: register, login, logout and whoami."""

from __future__ import annotations

from flask import Blueprint, request

from fitcoach.api.deps import (
    build_auth_service,
    current_context,
    json_body,
    json_response,
    require_auth,
    timing,
)
from fitcoach.core.errors import Unauthorized
from fitcoach.schemas import LoginSchema, RegisterSchema, TokenResponseSchema, UserSchema
from fitcoach.services.auth import LoginIn, LogoutIn, RegisterIn

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
user_schema = UserSchema()
token_schema = TokenResponseSchema()


@bp.post("/register")
@timing
def register():
    """Register a client or coach and return the created user."""

    payload = register_schema.load(json_body())
    user = build_auth_service().register(RegisterIn(**payload))
    return json_response({"data": user_schema.dump(user)}, status=201)


@bp.post("/login")
@timing
def login():
    """Authenticate credentials and issue an access token."""

    payload = login_schema.load(json_body())
    token = build_auth_service().login(LoginIn(**payload))
    return json_response({"data": token_schema.dump(token)})


@bp.post("/logout")
@require_auth
@timing
def logout():
    """Revoke the bearer token used for this request."""

    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise Unauthorized("Missing bearer token")
    build_auth_service().logout(LogoutIn(token=token.strip()))
    return json_response({"data": {"revoked": True}})


@bp.get("/whoami")
@require_auth
@timing
def whoami():
    """Return the authenticated user and its profile."""

    user = build_auth_service().whoami(current_context())
    return json_response({"data": user_schema.dump(user)})
