from __future__ import annotations

from datetime import datetime
from typing import Protocol


class TokenDenylistStore(Protocol):
    """
    Abstraction for a denylist of revoked **access tokens** keyed by JTI.

    Methods are expected to be idempotent.
    """

    def is_revoked(self, jti: str) -> bool: ...
    def revoke_jti(self, *, jti: str, expires_at: datetime) -> None: ...


class InMemoryDenylistStore(TokenDenylistStore):
    """Process-local denylist used when no Redis is configured."""

    def __init__(self) -> None:
        self._revoked: dict[str, datetime] = {}

    def is_revoked(self, jti: str) -> bool:
        return jti in self._revoked

    def revoke_jti(self, *, jti: str, expires_at: datetime) -> None:
        self._revoked[jti] = expires_at
