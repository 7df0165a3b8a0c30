from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from fitcoach.models.base import as_utc
from fitcoach.models.signup import BetaSignup
from fitcoach.services._shared.base import BaseService
from fitcoach.services._shared.errors import ValidationFailedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BetaSignupIn:
    first_name: str
    last_name: str
    email: str


@dataclass(frozen=True, slots=True)
class BetaSignupOut:
    id: int
    first_name: str
    last_name: str
    email: str
    created_at: datetime | None
    created: bool


class SignupService(BaseService):
    """Beta waiting-list capture; a repeated email returns the existing lead."""

    def signup(self, dto: BetaSignupIn) -> BetaSignupOut:
        errors: dict[str, list[str]] = {}
        for key in ("first_name", "last_name", "email"):
            if not (getattr(dto, key) or "").strip():
                errors[key] = ["Must not be blank."]
        if "email" not in errors and "@" not in dto.email:
            errors["email"] = ["Not a valid email address."]
        if errors:
            raise ValidationFailedError(errors)

        with self.rw_uow() as uow:
            repo = uow.beta_signups
            existing = repo.find_one(email=dto.email.strip().lower())
            if existing is not None:
                return self._to_out(existing, created=False)

            row = BetaSignup(
                first_name=dto.first_name.strip(),
                last_name=dto.last_name.strip(),
                email=dto.email,
            )
            repo.add(row)
            logger.info("Beta signup stored", extra={"signup_id": row.id})
            return self._to_out(row, created=True)

    @staticmethod
    def _to_out(row: BetaSignup, *, created: bool) -> BetaSignupOut:
        return BetaSignupOut(
            id=row.id,
            first_name=row.first_name,
            last_name=row.last_name,
            email=row.email,
            created_at=as_utc(row.created_at),
            created=created,
        )
