"""JWT callbacks: token revocation lookups and problem+json auth failures."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, current_app

from fitcoach.core.errors import as_problem, problem_response
from fitcoach.core.extensions import jwt
from fitcoach.services._shared.ports.denylist_store import (
    InMemoryDenylistStore,
    TokenDenylistStore,
)

log = logging.getLogger(__name__)

DENYLIST_EXTENSION_KEY = "token_denylist"


def build_denylist_store(app: Flask) -> TokenDenylistStore:
    """Pick the Redis-backed denylist when a client is configured."""
    redis_client = app.extensions.get("redis_client")
    if redis_client is not None:
        from fitcoach.infra.redis.redis_denylist_store import RedisTokenDenylistStore

        return RedisTokenDenylistStore(redis_client)
    return InMemoryDenylistStore()


def get_denylist_store() -> TokenDenylistStore:
    """Return the denylist bound to the current application."""
    return current_app.extensions[DENYLIST_EXTENSION_KEY]


def _unauthorized(message: str):
    problem = as_problem(status=HTTPStatus.UNAUTHORIZED, code="unauthorized", message=message)
    log.warning("Auth rejected: %s", message)
    return problem_response(problem, HTTPStatus.UNAUTHORIZED)


def init_app(app: Flask) -> None:
    """Register the denylist store and Flask-JWT-Extended loaders."""
    app.extensions[DENYLIST_EXTENSION_KEY] = build_denylist_store(app)

    @jwt.token_in_blocklist_loader
    def _is_revoked(_jwt_header: dict[str, Any], jwt_payload: dict[str, Any]) -> bool:
        return get_denylist_store().is_revoked(jwt_payload["jti"])

    @jwt.unauthorized_loader
    def _missing_token(reason: str):
        return _unauthorized(reason)

    @jwt.invalid_token_loader
    def _invalid_token(reason: str):
        return _unauthorized(reason)

    @jwt.expired_token_loader
    def _expired_token(_jwt_header: dict[str, Any], _jwt_payload: dict[str, Any]):
        return _unauthorized("Token has expired")

    @jwt.revoked_token_loader
    def _revoked_token(_jwt_header: dict[str, Any], _jwt_payload: dict[str, Any]):
        return _unauthorized("Token has been revoked")
