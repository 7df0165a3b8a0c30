from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from fitcoach.models.program import PROGRAM_STATUSES, PROGRAM_TYPE_LIFTING, PROGRAM_TYPES, Program
from fitcoach.models.user import ROLE_COACH
from fitcoach.repositories.program import ProgramRepository
from fitcoach.services._shared.base import BaseService, ServiceContext
from fitcoach.services._shared.dto import PageMeta
from fitcoach.services._shared.errors import NotFoundError, ValidationFailedError

from ._converters import program_to_out
from .dto import (
    ProgramCreateIn,
    ProgramDeleteOut,
    ProgramListIn,
    ProgramListOut,
    ProgramOut,
    ProgramUpdateIn,
)
from .payloads import ProgramDraftPayload, program_data_for, validate_program_payload

logger = logging.getLogger(__name__)


class ProgramService(BaseService):
    """Coach-side program authoring plus the marketplace read side."""

    # ------------------------------------------------------------------ #
    # Commands
    # ------------------------------------------------------------------ #

    def create(self, ctx: ServiceContext, dto: ProgramCreateIn) -> ProgramOut:
        """
        Create a program and, for lifting, its routines and exercises.

        Routines and exercises are positioned by list index starting at 1.
        The program row and the routine tree are written in one transaction.

        :raises AuthorizationError: If the caller is not a coach.
        :raises ValidationFailedError: On unknown type or invalid payload.
        """
        self.require_role(ctx, ROLE_COACH, msg="Only coaches can create programs.")

        errors = self._check_fields(
            name=dto.name, price=dto.price, status=dto.status, cycle_length=dto.cycle_length
        )
        payload = self._validate_payload(
            dto.type,
            errors,
            workout_days=dto.workout_days,
            meal_plans=dto.meal_plans,
            posing_plan=dto.posing_plan,
            partial=False,
        )

        cycle_length = dto.cycle_length
        if cycle_length is None:
            cycle_length = len(payload.workout_days or ()) if dto.type == PROGRAM_TYPE_LIFTING else 0

        with self.rw_uow() as uow:
            repo: ProgramRepository = uow.programs
            program = Program(
                coach_id=ctx.actor_id,
                name=dto.name.strip(),
                description=dto.description,
                type=dto.type,
                price=dto.price,
                is_public=dto.is_public,
                status=dto.status,
                cycle_length=cycle_length,
                program_data=program_data_for(payload),
            )
            repo.add(program)
            if payload.workout_days:
                repo.add_routines(program, payload.workout_days)

            logger.info(
                "Program created",
                extra={
                    "program_id": program.id,
                    "coach_id": ctx.actor_id,
                    "program_type": program.type,
                    "routine_count": len(payload.workout_days or ()),
                },
            )
            return program_to_out(program)

    def update(self, ctx: ServiceContext, dto: ProgramUpdateIn) -> ProgramOut:
        """
        Apply a partial update on a program owned by the caller.

        ``workout_days`` replaces the whole routine tree (delete then insert);
        old routine and exercise ids are not preserved.

        :raises NotFoundError: If the program is absent or owned by someone else.
        :raises PreconditionFailedError: If ``if_match`` is stale.
        :raises ValidationFailedError: On invalid fields or an attempted type change.
        """
        with self.rw_uow() as uow:
            repo: ProgramRepository = uow.programs
            program = repo.get_for_update(dto.program_id)
            if program is None:
                raise NotFoundError("Program", dto.program_id)
            self.ensure_owner(ctx, program.coach_id, entity="Program", key=dto.program_id)
            self.ensure_if_match(dto.if_match, program.compute_etag())

            errors = self._check_fields(
                name=dto.name, price=dto.price, status=dto.status, cycle_length=dto.cycle_length
            )
            if dto.type is not None and dto.type != program.type:
                errors["type"] = ["Program type cannot be changed."]
            payload = self._validate_payload(
                program.type,
                errors,
                workout_days=dto.workout_days,
                meal_plans=dto.meal_plans,
                posing_plan=dto.posing_plan,
                partial=True,
            )

            updates: dict[str, Any] = {
                key: value
                for key, value in (
                    ("name", dto.name.strip() if dto.name is not None else None),
                    ("description", dto.description),
                    ("price", dto.price),
                    ("is_public", dto.is_public),
                    ("status", dto.status),
                    ("cycle_length", dto.cycle_length),
                )
                if value is not None
            }
            if payload.meal_plans is not None or payload.posing_plan is not None:
                updates["program_data"] = program_data_for(payload)

            program.updated_at = datetime.now(UTC)
            repo.assign_updates(program, updates)
            if payload.workout_days is not None:
                repo.replace_routines(program, payload.workout_days)

            logger.info(
                "Program updated",
                extra={
                    "program_id": program.id,
                    "fields": sorted(updates),
                    "routines_replaced": payload.workout_days is not None,
                },
            )
            return program_to_out(program)

    def delete(self, ctx: ServiceContext, program_id: int) -> ProgramDeleteOut:
        """
        Delete a program and everything hanging off it in one transaction.

        :raises NotFoundError: If the program is absent or not owned by the caller.
        """
        with self.rw_uow() as uow:
            repo: ProgramRepository = uow.programs
            program = repo.get_for_update(program_id)
            if program is None:
                raise NotFoundError("Program", program_id)
            self.ensure_owner(ctx, program.coach_id, entity="Program", key=program_id)

            counts = repo.delete_cascade(program_id)
            logger.info("Program deleted", extra={"program_id": program_id, "deleted": counts})
            return ProgramDeleteOut(program_id=program_id, deleted=counts)

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def list(self, ctx: ServiceContext, dto: ProgramListIn) -> ProgramListOut:
        """List programs visible to the caller (own ones plus public active ones)."""
        if dto.type is not None and dto.type not in PROGRAM_TYPES:
            raise ValidationFailedError({"type": [f"Must be one of: {', '.join(PROGRAM_TYPES)}."]})

        pagination = self.ensure_pagination(
            page=dto.page, limit=dto.limit, sort=dto.sort or ["-created_at"]
        )
        filters = {
            "type": dto.type,
            "coach_id": ctx.actor_id if dto.mine else dto.coach_id,
        }
        with self.ro_uow() as uow:
            page = uow.programs.list_visible(
                viewer_id=ctx.actor_id, pagination=pagination, filters=filters
            )
            items = [program_to_out(p) for p in page.items]
        return ProgramListOut(
            items=items,
            meta=PageMeta.build(page=page.page, limit=page.limit, total=page.total),
        )

    def get(self, ctx: ServiceContext, program_id: int) -> ProgramOut:
        """
        :raises NotFoundError: If the program is absent or hidden from the caller.
        """
        with self.ro_uow() as uow:
            program = uow.programs.get_visible(program_id, ctx.actor_id)
            if program is None:
                raise NotFoundError("Program", program_id)
            return program_to_out(program)

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _check_fields(
        *,
        name: str | None,
        price: float | None,
        status: str | None,
        cycle_length: int | None,
    ) -> dict[str, list[str]]:
        errors: dict[str, list[str]] = {}
        if name is not None and not name.strip():
            errors["name"] = ["Must not be blank."]
        if price is not None and price < 0:
            errors["price"] = ["Must be greater than or equal to 0."]
        if status is not None and status not in PROGRAM_STATUSES:
            errors["status"] = [f"Must be one of: {', '.join(PROGRAM_STATUSES)}."]
        if cycle_length is not None and cycle_length < 0:
            errors["cycle_length"] = ["Must be greater than or equal to 0."]
        return errors

    @staticmethod
    def _validate_payload(
        program_type: str,
        errors: dict[str, list[str]],
        **payload: Any,
    ) -> ProgramDraftPayload:
        """Validate the type-specific payload and raise once with every field error."""
        draft: ProgramDraftPayload | None = None
        try:
            draft = validate_program_payload(program_type, **payload)
        except ValidationFailedError as exc:
            errors.update({key: list(msgs) for key, msgs in exc.errors.items()})
        if errors or draft is None:
            raise ValidationFailedError(errors)
        return draft
