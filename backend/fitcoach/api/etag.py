"""ETag helpers for optimistic concurrency on program updates."""

from __future__ import annotations

from typing import Any

from flask import Response, request


def set_response_etag(response: Response, resource: Any) -> Response:
    """Attach the resource's ``etag`` (when it has one) as a strong ``ETag``."""

    value = getattr(resource, "etag", None)
    if value:
        response.set_etag(value)
    return response


def read_if_match() -> str | None:
    """Return the raw ``If-Match`` value, or ``None`` when absent or ``*``."""

    raw = request.headers.get("If-Match")
    if raw is None:
        return None
    raw = raw.strip()
    if not raw or raw == "*":
        return None
    if raw.startswith("W/"):
        raw = raw[2:]
    return raw.strip('"')
