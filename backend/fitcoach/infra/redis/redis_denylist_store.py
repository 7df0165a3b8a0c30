from datetime import UTC, datetime
from typing import cast

import redis  # type: ignore[import-untyped]


class RedisTokenDenylistStore:
    """
    Denylist for revoked **access tokens** by jti.

    Entries expire together with the token they revoke.
    """

    def __init__(self, r: redis.Redis):
        self.r = r

    @staticmethod
    def _k(jti: str) -> str:
        return f"deny:at:{jti}"

    def is_revoked(self, jti: str) -> bool:
        return cast(int, self.r.exists(self._k(jti))) == 1

    def revoke_jti(self, *, jti: str, expires_at: datetime) -> None:
        now = datetime.now(UTC).timestamp()
        ttl = max(1, int(expires_at.timestamp() - now))
        self.r.set(self._k(jti), "1", ex=ttl)
