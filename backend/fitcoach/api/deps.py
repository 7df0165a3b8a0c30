"""Shared API helpers: auth guards, request context, pagination and timing."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, jsonify, request
from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request

from fitcoach.core.errors import Forbidden, Unauthorized
from fitcoach.core.logger import ensure_request_id
from fitcoach.core.security import get_denylist_store
from fitcoach.infra.jwt.flask_jwt_token_provider import JWTTokenProvider
from fitcoach.schemas.common import PaginationQuerySchema
from fitcoach.services._shared.base import ServiceContext
from fitcoach.services._shared.dto import PaginationIn
from fitcoach.services.auth import AuthService, AuthTokenConfig
from fitcoach.services.reporting import ReportingConfig

F = TypeVar("F", bound=Callable[..., Any])


def parse_pagination(default_limit: int = 20, max_limit: int = 100) -> PaginationIn:
    """Parse ``page``/``limit``/``sort`` from ``request.args`` using Marshmallow."""

    schema = PaginationQuerySchema(default_limit=default_limit, max_limit=max_limit)
    data = schema.load(request.args)
    return PaginationIn(page=data["page"], limit=data["limit"], sort=data["sort"])


def current_context() -> ServiceContext:
    """Resolve the verified JWT into the caller's :class:`ServiceContext`."""

    identity = get_jwt_identity()
    claims = get_jwt() or {}
    try:
        actor_id = int(identity)
    except (TypeError, ValueError) as exc:
        raise Unauthorized("Invalid token subject") from exc
    role = claims.get("role")
    if not role:
        raise Unauthorized("Token is missing the role claim")
    return ServiceContext(actor_id=actor_id, role=role, request_id=ensure_request_id())


def require_auth(func: F) -> F:
    """Ensure the request carries a valid, non-revoked access token."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        verify_jwt_in_request(optional=False)
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def require_role(role: str) -> Callable[[F], F]:
    """Ensure the verified JWT carries the given ``role`` claim."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            verify_jwt_in_request(optional=False)
            claims = get_jwt() or {}
            if claims.get("role") != role:
                raise Forbidden(f"Only a {role} can perform this action.")
            return func(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator


def json_body() -> dict[str, Any]:
    """Return the JSON body, treating anything but an object as empty."""

    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request.endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]


# ------------------------------ Services ---------------------------------- #


def build_auth_service() -> AuthService:
    """Auth service wired to Flask-JWT-Extended and the app's denylist."""

    return AuthService(
        token_provider=JWTTokenProvider(),
        denylist_store=get_denylist_store(),
        token_cfg=AuthTokenConfig(access_expires=current_app.config["JWT_ACCESS_TOKEN_EXPIRES"]),
    )


def reporting_config() -> ReportingConfig:
    cfg = current_app.config
    return ReportingConfig(
        progress_window=cfg.get("CLIENT_PROGRESS_WINDOW", 30),
        recent_limit=cfg.get("DASHBOARD_RECENT_LIMIT", 10),
        trend_limit=cfg.get("PROGRESS_TREND_LIMIT", 30),
    )
