from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, cast

from fitcoach.services._shared.ports import TokenProvider


@dataclass(slots=True)
class JWTTokenProvider(TokenProvider):
    """
    Adapter for Flask-JWT-Extended.

    .. note::
       Requires an active Flask app context with JWT settings loaded.
    """

    def create_access_token(
        self,
        *,
        identity: str,
        additional_claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str:
        from flask_jwt_extended import create_access_token as _create_access

        return cast(
            str,
            _create_access(
                identity=identity,
                additional_claims=additional_claims or {},
                expires_delta=expires_delta,
            ),
        )

    def decode(self, token: str) -> dict[str, Any]:
        from flask_jwt_extended import decode_token

        # Revoked tokens must still decode so logout stays idempotent.
        return cast(dict[str, Any], decode_token(token, allow_expired=True))

    def get_jti(self, token: str) -> str:
        return cast(str, self.decode(token)["jti"])

    def get_subject(self, token: str) -> str:
        return str(self.decode(token)["sub"])

    def get_expires_at(self, token: str) -> datetime:
        return datetime.fromtimestamp(int(self.decode(token)["exp"]), tz=UTC)
