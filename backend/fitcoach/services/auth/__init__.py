"""Authentication service and DTOs."""

from __future__ import annotations

from .dto import AuthTokenConfig, LoginIn, LogoutIn, RegisterIn, TokenOut
from .service import MIN_PASSWORD_LENGTH, AuthService

__all__ = [
    "AuthService",
    "AuthTokenConfig",
    "LoginIn",
    "LogoutIn",
    "MIN_PASSWORD_LENGTH",
    "RegisterIn",
    "TokenOut",
]
