from __future__ import annotations

import copy
import logging
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.exc import IntegrityError

from fitcoach.models.enrollment import ClientProgram, empty_enrollment_data
from fitcoach.models.user import ROLE_CLIENT
from fitcoach.repositories.enrollment import ClientProgramRepository
from fitcoach.services._shared.base import BaseService, ServiceContext
from fitcoach.services._shared.errors import (
    AlreadyEnrolledError,
    NotFoundError,
    ValidationFailedError,
)
from fitcoach.services._shared.policies.common import is_owner
from fitcoach.services.programs.payloads import validate_overrides

from ._converters import CUSTOMIZABLE_FIELDS, STRUCTURAL_FIELDS, enrollment_to_out
from .dto import CustomizationIn, EnrollmentOut

logger = logging.getLogger(__name__)


class EnrollmentService(BaseService):
    """
    Client enrollments in coach programs.

    An enrollment references the live template; nothing is copied on enroll.
    Overrides stored under ``customizations`` replace individual template
    fields for that client only.
    """

    def enroll(self, ctx: ServiceContext, program_id: int) -> EnrollmentOut:
        """
        Enroll the calling client in a visible program.

        The early check gives a clean error; the partial unique index on
        ``(client_id, program_id) WHERE active`` settles concurrent attempts.

        :raises AuthorizationError: If the caller is not a client.
        :raises NotFoundError: If the program is absent or not visible.
        :raises AlreadyEnrolledError: If an active enrollment already exists.
        """
        self.require_role(ctx, ROLE_CLIENT, msg="Only clients can enroll in programs.")

        with self.rw_uow() as uow:
            program = uow.programs.get_visible(program_id, ctx.actor_id)
            if program is None:
                raise NotFoundError("Program", program_id)

            repo: ClientProgramRepository = uow.enrollments
            if repo.find_active(ctx.actor_id, program_id) is not None:
                raise AlreadyEnrolledError(program_id)

            enrollment = ClientProgram(
                client_id=ctx.actor_id,
                program_id=program_id,
                active=True,
                start_date=datetime.now(UTC),
                version=1,
                client_program_data=empty_enrollment_data(),
            )
            try:
                repo.add(enrollment)
            except IntegrityError as exc:
                raise AlreadyEnrolledError(program_id) from exc

            logger.info(
                "Client enrolled",
                extra={
                    "enrollment_id": enrollment.id,
                    "client_id": ctx.actor_id,
                    "program_id": program_id,
                },
            )
            return enrollment_to_out(enrollment)

    def get(self, ctx: ServiceContext, enrollment_id: int) -> EnrollmentOut:
        """
        :raises NotFoundError: Unless the enrollment belongs to the caller.
        """
        with self.ro_uow() as uow:
            enrollment = uow.enrollments.get_owned(enrollment_id, ctx.actor_id)
            if enrollment is None:
                raise NotFoundError("Enrollment", enrollment_id)
            return enrollment_to_out(enrollment)

    def list(self, ctx: ServiceContext, *, active_only: bool = False) -> list[EnrollmentOut]:
        with self.ro_uow() as uow:
            rows = uow.enrollments.list_for_client(ctx.actor_id, active_only=active_only)
            return [enrollment_to_out(row) for row in rows]

    def set_active(self, ctx: ServiceContext, enrollment_id: int, active: bool) -> EnrollmentOut:
        """
        Activate or deactivate one of the caller's enrollments.

        Deactivating frees the ``(client, program)`` slot for a new enrollment.

        :raises NotFoundError: Unless the enrollment belongs to the caller.
        :raises AlreadyEnrolledError: When reactivating while another active
            enrollment in the same program exists.
        """
        with self.rw_uow() as uow:
            repo: ClientProgramRepository = uow.enrollments
            enrollment = repo.get_owned_for_update(enrollment_id, ctx.actor_id)
            if enrollment is None:
                raise NotFoundError("Enrollment", enrollment_id)

            if active and not enrollment.active:
                other = repo.find_active(ctx.actor_id, enrollment.program_id)
                if other is not None and other.id != enrollment.id:
                    raise AlreadyEnrolledError(enrollment.program_id)

            enrollment.active = active
            try:
                repo.flush()
            except IntegrityError as exc:
                raise AlreadyEnrolledError(enrollment.program_id) from exc

            logger.info(
                "Enrollment state changed",
                extra={"enrollment_id": enrollment_id, "active": active},
            )
            return enrollment_to_out(enrollment)

    def customize(self, ctx: ServiceContext, dto: CustomizationIn) -> EnrollmentOut:
        """
        Store per-client overrides of template fields.

        Allowed for the enrolled client and for the coach who owns the program.
        Structural overrides are validated against the program type, and each
        call that stores or drops one bumps ``version`` by one.

        :raises NotFoundError: If the enrollment is not visible to the caller.
        :raises ValidationFailedError: On unknown keys or invalid payloads.
        """
        unknown = sorted(set(dto.overrides) - set(CUSTOMIZABLE_FIELDS))
        unknown += sorted(set(dto.clear) - set(CUSTOMIZABLE_FIELDS))
        if unknown:
            raise ValidationFailedError({key: ["Not a customizable field."] for key in unknown})

        with self.rw_uow() as uow:
            enrollment = uow.enrollments.get_for_update(dto.enrollment_id)
            if enrollment is None or not self._may_customize(ctx, enrollment):
                raise NotFoundError("Enrollment", dto.enrollment_id)

            program_type = enrollment.program.type
            structural = validate_overrides(program_type, dto.overrides)
            errors: dict[str, list[str]] = {}
            for key in ("name", "notes"):
                if key in dto.overrides and not isinstance(dto.overrides[key], str | None):
                    errors[key] = ["Not a valid string."]
            if errors:
                raise ValidationFailedError(errors)

            data: dict[str, Any] = copy.deepcopy(enrollment.client_program_data or {})
            custom: dict[str, Any] = dict(data.get("customizations") or {})
            for key in dto.clear:
                custom.pop(key, None)
            for key in ("name", "notes"):
                if key in dto.overrides:
                    if dto.overrides[key]:
                        custom[key] = dto.overrides[key]
                    else:
                        custom.pop(key, None)
            custom.update(structural)

            touched = set(structural) | (set(dto.clear) & set(STRUCTURAL_FIELDS))
            if custom:
                data["customizations"] = custom
            else:
                data.pop("customizations", None)
            enrollment.client_program_data = data
            if touched:
                enrollment.version = int(enrollment.version or 1) + 1
            uow.enrollments.flush()

            logger.info(
                "Enrollment customized",
                extra={
                    "enrollment_id": enrollment.id,
                    "fields": sorted(set(dto.overrides) | set(dto.clear)),
                    "version": enrollment.version,
                },
            )
            return enrollment_to_out(enrollment)

    @staticmethod
    def _may_customize(ctx: ServiceContext, enrollment: ClientProgram) -> bool:
        if ctx.is_client:
            return is_owner(actor_id=ctx.actor_id, owner_id=enrollment.client_id)
        return is_owner(actor_id=ctx.actor_id, owner_id=enrollment.program.coach_id)
