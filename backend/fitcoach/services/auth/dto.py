from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

from fitcoach.services.profiles.dto import UserOut

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for registration.

    :param role: ``client`` or ``coach``; fixed for the account's lifetime.
    :param profile: Initial role-specific profile fields.
    """

    username: str
    password: str
    role: str
    email: str | None = None
    full_name: str | None = None
    profile: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class LoginIn:
    username: str
    password: str


@dataclass(frozen=True, slots=True)
class LogoutIn:
    """:param token: Encoded access JWT to revoke."""

    token: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenOut:
    access_token: str
    expires_in: int
    user: UserOut
    token_type: str = "Bearer"


@dataclass(frozen=True, slots=True)
class AuthTokenConfig:
    """:param access_expires: Access token lifetime."""

    access_expires: timedelta = timedelta(minutes=60)
