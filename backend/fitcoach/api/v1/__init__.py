"""API v1 blueprint package bundling versioned routes."""

from __future__ import annotations

from flask import Blueprint

API_VERSION = "v1"

# Import blueprints *only here* to keep imports localized and avoid cycles.
from .auth import bp as auth_bp  # noqa: E402
from .enrollments import bp as enrollments_bp  # noqa: E402
from .health import bp as health_bp  # noqa: E402
from .logs import meals_bp, workouts_bp  # noqa: E402
from .profile import bp as profile_bp  # noqa: E402
from .programs import bp as programs_bp  # noqa: E402
from .reporting import bp as reporting_bp  # noqa: E402
from .signups import bp as signups_bp  # noqa: E402

# Each tuple: (blueprint, url_prefix_relative_to_version)
REGISTRY: list[tuple[Blueprint, str]] = [
    (health_bp, ""),  # -> /api/v1/health
    (auth_bp, "/auth"),
    (profile_bp, "/profile"),
    (programs_bp, "/programs"),
    (enrollments_bp, "/client/programs"),
    (workouts_bp, "/workouts"),
    (meals_bp, "/meals"),
    (reporting_bp, ""),  # dashboards, /progress, coach client history
    (signups_bp, "/beta-signup"),
]
