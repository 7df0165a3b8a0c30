from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from fitcoach.models.user import ROLE_CLIENT, ROLE_COACH
from fitcoach.repositories.base import Pagination
from fitcoach.services._shared.errors import (
    AuthorizationError,
    NotFoundError,
    PreconditionFailedError,
)
from fitcoach.services._shared.policies.common import is_owner
from fitcoach.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)


@dataclass(frozen=True, slots=True)
class ServiceContext:
    """
    Authenticated caller, resolved once per request and passed explicitly.

    :param actor_id: Authenticated user identifier.
    :param role: ``client`` or ``coach``.
    :param request_id: Correlation id for logging.
    """

    actor_id: int
    role: str
    request_id: str | None = None

    @property
    def is_coach(self) -> bool:
        return self.role == ROLE_COACH

    @property
    def is_client(self) -> bool:
        return self.role == ROLE_CLIENT


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round like a person would (``2.5 -> 3``), unlike :func:`round`."""
    quantum = Decimal(1).scaleb(-ndigits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def display_name(user, *, fallback: str = "Unnamed Client") -> str:
    """``full_name`` → local part of ``username`` → ``fallback``; never empty."""
    full_name = (getattr(user, "full_name", None) or "").strip()
    if full_name:
        return full_name
    username = (getattr(user, "username", None) or "").split("@")[0].strip()
    return username or fallback


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide read-only and read-write units of work.
    * Offer shared guards (role, ownership, pagination, ``If-Match``).
    * Stay free of web concerns: no Flask request, no HTTP status codes.
    """

    DEFAULT_READ_ISOLATION = "READ COMMITTED"

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork()

    def ro_uow(
        self, *, isolation: str | None = None, enforce_db_readonly: bool = True
    ) -> SQLAlchemyReadOnlyUnitOfWork:
        return SQLAlchemyReadOnlyUnitOfWork(
            isolation_level=isolation or self.DEFAULT_READ_ISOLATION,
            enforce_db_readonly=enforce_db_readonly,
        )

    # ----------------------- Validation utilities ---------------------------

    def ensure_pagination(
        self, *, page: int, limit: int, sort: Iterable[str] | None = None
    ) -> Pagination:
        return Pagination(page=max(1, int(page)), limit=max(1, int(limit)), sort=list(sort or []))

    def ensure_if_match(self, provided_etag: str | None, current_etag: str | None) -> None:
        """
        Validate an optional ``If-Match`` precondition.

        :raises PreconditionFailedError: When an ETag was provided and differs.
        """
        if provided_etag is None:
            return
        if provided_etag.strip('"') != current_etag:
            raise PreconditionFailedError()

    # ------------------------------ AuthZ -----------------------------------

    def require_role(self, ctx: ServiceContext, role: str, *, msg: str | None = None) -> None:
        """
        :raises AuthorizationError: When the caller does not hold ``role``.
        """
        if ctx.role != role:
            raise AuthorizationError(msg or f"Only a {role} can perform this action.")

    def ensure_owner(
        self, ctx: ServiceContext, owner_id: int, *, entity: str, key: int | str
    ) -> None:
        """
        Hide resources the caller does not own.

        :raises NotFoundError: If the caller is not the owner, so existence never leaks.
        """
        if not is_owner(actor_id=ctx.actor_id, owner_id=owner_id):
            raise NotFoundError(entity, key)
