from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from fitcoach.repositories.user import ProfileRepository, UserRepository
from fitcoach.services._shared.base import BaseService, ServiceContext
from fitcoach.services._shared.errors import ConflictError, NotFoundError, ValidationFailedError

from ._converters import user_to_out
from .dto import ProfileUpdateIn, UserOut

logger = logging.getLogger(__name__)


class ProfileService(BaseService):
    """Read and edit the caller's own user row and role profile."""

    def get(self, ctx: ServiceContext) -> UserOut:
        with self.ro_uow() as uow:
            user = uow.users.get(ctx.actor_id)
            if user is None:
                raise NotFoundError("User", ctx.actor_id)
            return user_to_out(user)

    def update(self, ctx: ServiceContext, dto: ProfileUpdateIn) -> UserOut:
        """
        Update shared and role-specific fields; ``role`` is never updatable.

        :raises ValidationFailedError: On non-updatable keys or a malformed email.
        :raises ConflictError: If the email belongs to another user.
        """
        with self.rw_uow() as uow:
            users: UserRepository = uow.users
            profiles: ProfileRepository = uow.profiles
            user = users.get(ctx.actor_id)
            if user is None:
                raise NotFoundError("User", ctx.actor_id)

            allowed_profile = (
                ProfileRepository.COACH_FIELDS if user.is_coach else ProfileRepository.CLIENT_FIELDS
            )
            errors: dict[str, list[str]] = {}
            for key in dto.user_fields:
                if key not in users._updatable_fields():
                    errors[key] = ["Field cannot be updated."]
            for key in dto.profile_fields:
                if key not in allowed_profile:
                    errors[f"profile.{key}"] = [f"Not a {user.role} profile field."]
            if errors:
                raise ValidationFailedError(errors)

            email = dto.user_fields.get("email")
            if email and users.exists_by_email(email, exclude_id=user.id):
                raise ConflictError("User", "email already registered")

            try:
                users.assign_updates(user, dto.user_fields)
            except ValueError as exc:
                raise ValidationFailedError({"email": [str(exc)]}) from exc
            except IntegrityError as exc:
                raise ConflictError("User", "email already registered") from exc

            if dto.profile_fields:
                profile = profiles.get_or_create_for(user)
                profiles.apply(profile, dto.profile_fields)

            logger.info(
                "Profile updated",
                extra={
                    "user_id": user.id,
                    "fields": sorted(set(dto.user_fields) | set(dto.profile_fields)),
                },
            )
            return user_to_out(user)
