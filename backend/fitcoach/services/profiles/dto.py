from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class ProfileUpdateIn:
    """
    Partial profile update.

    :param user_fields: Shared fields (``full_name``, ``email``, ...).
    :param profile_fields: Role-specific fields (coach or client).
    """

    user_fields: dict[str, Any] = field(default_factory=dict)
    profile_fields: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class UserOut:
    """Public projection of a user and its role profile."""

    id: int
    uuid: str
    username: str
    email: str | None
    role: str
    full_name: str | None
    phone_number: str | None
    profile_picture_url: str | None
    is_public_profile: bool
    created_at: datetime | None
    profile: dict[str, Any]
