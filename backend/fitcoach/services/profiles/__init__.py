"""Profile service and the public user projection."""

from __future__ import annotations

from ._converters import user_to_out
from .dto import ProfileUpdateIn, UserOut
from .service import ProfileService

__all__ = ["ProfileService", "ProfileUpdateIn", "UserOut", "user_to_out"]
