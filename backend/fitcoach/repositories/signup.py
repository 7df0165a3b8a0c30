from __future__ import annotations

from fitcoach.models.signup import BetaSignup
from fitcoach.repositories.base import BaseRepository


class BetaSignupRepository(BaseRepository[BetaSignup]):
    model = BetaSignup

    def _filterable_fields(self):
        return {"email": BetaSignup.email}
