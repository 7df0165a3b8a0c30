from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any, Protocol


class TokenProvider(Protocol):
    """Port for issuing and decoding access tokens."""

    def create_access_token(
        self,
        *,
        identity: str,
        additional_claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str: ...

    def decode(self, token: str) -> dict[str, Any]: ...

    def get_jti(self, token: str) -> str: ...

    def get_subject(self, token: str) -> str: ...

    def get_expires_at(self, token: str) -> datetime: ...


class StubTokenProvider(TokenProvider):
    """Deterministic token provider used in unit tests."""

    def __init__(self) -> None:
        self._now = datetime.now(tz=UTC)
        self._seq = 0
        self._issued: dict[str, dict[str, Any]] = {}

    def create_access_token(
        self,
        *,
        identity: str,
        additional_claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str:
        self._seq += 1
        jti = f"jti-{self._seq}"
        token = f"access.{identity}.{jti}"
        payload: dict[str, Any] = {
            "sub": identity,
            "type": "access",
            "jti": jti,
            "exp": int((self._now + (expires_delta or timedelta(minutes=15))).timestamp()),
        }
        payload.update(additional_claims or {})
        self._issued[token] = payload
        return token

    def decode(self, token: str) -> dict[str, Any]:
        return self._issued[token]

    def get_jti(self, token: str) -> str:
        return str(self.decode(token)["jti"])

    def get_subject(self, token: str) -> str:
        return str(self.decode(token)["sub"])

    def get_expires_at(self, token: str) -> datetime:
        return datetime.fromtimestamp(int(self.decode(token)["exp"]), tz=UTC)
