"""Workout and meal log repositories."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, TypeVar, cast

from sqlalchemy import func, select

from fitcoach.models.logs import MealLog, WorkoutLog
from fitcoach.repositories.base import BaseRepository

L = TypeVar("L", WorkoutLog, MealLog)


class _ClientLogRepository(BaseRepository[L]):
    """Queries shared by both log kinds; all scoped by ``client_id``."""

    def _updatable_fields(self) -> set[str]:
        return {"data"}

    def get_owned(self, log_id: int, client_id: int) -> L | None:
        model = self.model
        stmt = select(model).where(model.id == log_id, model.client_id == client_id)
        return cast(L | None, self.session.execute(stmt).scalars().first())

    def history(self, client_id: int, enrollment_id: int) -> list[L]:
        """Logs of one enrollment, newest first."""
        model = self.model
        stmt = (
            select(model)
            .where(model.client_id == client_id, model.client_program_id == enrollment_id)
            .order_by(model.date.desc(), model.id.desc())
        )
        return list(self.session.execute(stmt).scalars().all())

    def for_client(self, client_id: int, *, limit: int | None = None) -> list[L]:
        """All logs of a client across enrollments, newest first."""
        model = self.model
        stmt = (
            select(model)
            .where(model.client_id == client_id)
            .order_by(model.date.desc(), model.id.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.session.execute(stmt).scalars().all())

    def count_for_client(self, client_id: int) -> int:
        model = self.model
        stmt = select(func.count(model.id)).where(model.client_id == client_id)
        return int(self.session.execute(stmt).scalar_one())

    def count_by_enrollment(self, enrollment_ids: Iterable[int]) -> dict[int, int]:
        ids = list(enrollment_ids)
        if not ids:
            return {}
        model = self.model
        stmt = (
            select(model.client_program_id, func.count(model.id))
            .where(model.client_program_id.in_(ids))
            .group_by(model.client_program_id)
        )
        return {int(eid): int(n) for eid, n in self.session.execute(stmt).all()}


class WorkoutLogRepository(_ClientLogRepository[WorkoutLog]):
    model = WorkoutLog


class MealLogRepository(_ClientLogRepository[MealLog]):
    model = MealLog

    def _updatable_fields(self) -> set[str]:
        return {"calories", "protein", "carbs", "fats", "data"}

    def macro_totals(self, client_id: int) -> dict[str, Any]:
        """Count and sums of calories/protein over every meal of the client."""
        stmt = select(
            func.count(MealLog.id),
            func.coalesce(func.sum(MealLog.calories), 0),
            func.coalesce(func.sum(MealLog.protein), 0),
        ).where(MealLog.client_id == client_id)
        count, calories, protein = self.session.execute(stmt).one()
        return {"count": int(count), "calories": int(calories), "protein": int(protein)}
