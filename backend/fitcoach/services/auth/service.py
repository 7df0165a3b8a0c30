from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError

from fitcoach.models.user import ROLE_COACH, USER_ROLES, User
from fitcoach.repositories.user import ProfileRepository, UserRepository
from fitcoach.services._shared.base import BaseService, ServiceContext
from fitcoach.services._shared.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationFailedError,
)
from fitcoach.services._shared.ports.denylist_store import TokenDenylistStore
from fitcoach.services._shared.ports.token_provider import TokenProvider
from fitcoach.services.profiles import UserOut, user_to_out

from .dto import AuthTokenConfig, LoginIn, LogoutIn, RegisterIn, TokenOut

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


class AuthService(BaseService):
    """
    Registration and the access-token lifecycle (login / logout / whoami).

    Tokens are issued through a :class:`TokenProvider`; logout revokes the
    token's JTI in a :class:`TokenDenylistStore` until it expires.
    """

    def __init__(
        self,
        *,
        token_provider: TokenProvider,
        denylist_store: TokenDenylistStore,
        token_cfg: AuthTokenConfig | None = None,
    ) -> None:
        super().__init__()
        self.tokens = token_provider
        self.denylist = denylist_store
        self.cfg = token_cfg or AuthTokenConfig()

    # ------------------------------------------------------------------ #
    # Registration
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> UserOut:
        """
        Create a user and its role profile in one transaction.

        :raises ValidationFailedError: On unknown role, short password, bad email
            or profile fields that do not belong to the role.
        :raises ConflictError: If the username or email is taken.
        """
        errors: dict[str, list[str]] = {}
        if dto.role not in USER_ROLES:
            errors["role"] = [f"Must be one of: {', '.join(USER_ROLES)}."]
        if len(dto.password or "") < MIN_PASSWORD_LENGTH:
            errors["password"] = [f"Must be at least {MIN_PASSWORD_LENGTH} characters."]
        if not (dto.username or "").strip():
            errors["username"] = ["Must not be blank."]
        allowed = (
            ProfileRepository.COACH_FIELDS if dto.role == ROLE_COACH else ProfileRepository.CLIENT_FIELDS
        )
        for key in dto.profile:
            if key not in allowed:
                errors[f"profile.{key}"] = ["Unknown profile field for this role."]
        if errors:
            raise ValidationFailedError(errors)

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            if repo.exists_by_username(dto.username):
                raise ConflictError("User", "username already taken")
            if dto.email and repo.exists_by_email(dto.email):
                raise ConflictError("User", "email already registered")

            try:
                user = User(
                    username=dto.username,
                    email=dto.email,
                    role=dto.role,
                    full_name=dto.full_name,
                )
                user.password = dto.password
            except ValueError as exc:
                raise ValidationFailedError({"email": [str(exc)]}) from exc

            try:
                repo.create_with_profile(user, dict(dto.profile))
            except IntegrityError as exc:
                raise ConflictError("User", "username or email already registered") from exc

            logger.info("User registered", extra={"user_id": user.id, "role": user.role})
            return user_to_out(user)

    # ------------------------------------------------------------------ #
    # Tokens
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> TokenOut:
        """
        Verify credentials and issue an access token carrying the role claim.

        :raises AuthenticationError: If the credentials do not match.
        """
        with self.ro_uow() as uow:
            user = uow.users.authenticate(dto.username, dto.password)
            if user is None:
                logger.info("Login rejected")
                raise AuthenticationError()
            user_out = user_to_out(user)

        claims: dict[str, Any] = {"role": user_out.role, "uid": user_out.id}
        token = self.tokens.create_access_token(
            identity=str(user_out.id),
            additional_claims=claims,
            expires_delta=self.cfg.access_expires,
        )
        logger.info("Login succeeded", extra={"user_id": user_out.id})
        return TokenOut(
            access_token=token,
            expires_in=int(self.cfg.access_expires.total_seconds()),
            user=user_out,
        )

    def logout(self, dto: LogoutIn) -> None:
        """Revoke the presented access token until its natural expiry."""
        jti = self.tokens.get_jti(dto.token)
        self.denylist.revoke_jti(jti=jti, expires_at=self.tokens.get_expires_at(dto.token))
        logger.info("Token revoked", extra={"subject": self.tokens.get_subject(dto.token)})

    def whoami(self, ctx: ServiceContext) -> UserOut:
        with self.ro_uow() as uow:
            user = uow.users.get(ctx.actor_id)
            if user is None:
                raise NotFoundError("User", ctx.actor_id)
            return user_to_out(user)
