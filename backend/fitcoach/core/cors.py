"""CORS configuration helper for API resources."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS


def init_app(app: Flask) -> None:
    """Configure CORS for ``/api/*`` based on ``CORS_ORIGINS``.

    A blank value or ``"*"`` allows any origin and disables credentials.
    """
    raw_origins = app.config.get("CORS_ORIGINS", "")
    origins = [o.strip() for o in raw_origins.split(",") if o.strip()]
    wildcard = not origins or origins == ["*"]

    CORS(
        app,
        resources={r"/api/*": {"origins": "*" if wildcard else origins}},
        supports_credentials=not wildcard,
        expose_headers=["ETag", "X-Request-ID"],
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
