"""Program template repository: programs, their routines and exercises."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, cast

from sqlalchemy import Select, and_, delete, or_, select
from sqlalchemy.orm import InstrumentedAttribute

from fitcoach.models.enrollment import ClientProgram
from fitcoach.models.logs import MealLog, WorkoutLog
from fitcoach.models.program import Program, ProgramExercise, Routine
from fitcoach.repositories.base import BaseRepository, Page, Pagination

_SYNC = {"synchronize_session": "fetch"}


class ProgramRepository(BaseRepository[Program]):
    """Persist :class:`Program` aggregates and their ordered routine tree.

    Ownership and type rules live in the service layer; this class only knows
    how rows are laid out.
    """

    model = Program

    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {
            "id": Program.id,
            "name": Program.name,
            "price": Program.price,
            "type": Program.type,
            "created_at": Program.created_at,
        }

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {
            "type": Program.type,
            "coach_id": Program.coach_id,
            "status": Program.status,
        }

    def _updatable_fields(self) -> set[str]:
        return {
            "name",
            "description",
            "price",
            "is_public",
            "status",
            "cycle_length",
            "program_data",
        }

    # ------------------------------- Queries ---------------------------------

    def _visible_to(self, stmt: Select[Any], viewer_id: int) -> Select[Any]:
        """Owners see all their programs; others only public, active ones."""
        return stmt.where(
            or_(
                Program.coach_id == viewer_id,
                and_(Program.is_public.is_(True), Program.status == "active"),
            )
        )

    def list_visible(
        self,
        *,
        viewer_id: int,
        pagination: Pagination,
        filters: Mapping[str, Any] | None = None,
    ) -> Page[Program]:
        stmt = self._visible_to(select(Program), viewer_id)
        stmt = self._apply_equality_filters(stmt, filters)
        return self.paginate_stmt(stmt, pagination)

    def get_visible(self, program_id: int, viewer_id: int) -> Program | None:
        stmt = self._visible_to(select(Program).where(Program.id == program_id), viewer_id)
        return cast(Program | None, self.session.execute(stmt).scalars().first())

    def list_by_coach(self, coach_id: int) -> list[Program]:
        return self.list(filters={"coach_id": coach_id}, sort=["created_at"])

    # ------------------------------ Routines ---------------------------------

    def add_routines(self, program: Program, workout_days: Sequence[Any]) -> list[Routine]:
        """Insert routines and exercises in list order, positions starting at 1."""
        created: list[Routine] = []
        for day_index, day in enumerate(workout_days, start=1):
            routine = Routine(
                program_id=program.id,
                name=day.name,
                day_of_week=day.day_of_week,
                notes=day.notes,
                order_in_cycle=day_index,
            )
            routine.exercises = [
                ProgramExercise(
                    name=ex.name,
                    description=ex.description,
                    sets=ex.sets,
                    reps=ex.reps,
                    rest_time=ex.rest_time,
                    notes=ex.notes,
                    order_in_routine=ex_index,
                )
                for ex_index, ex in enumerate(day.exercises, start=1)
            ]
            self.session.add(routine)
            created.append(routine)
        self.flush()
        self.session.expire(program, ["routines"])
        return created

    def clear_routines(self, program_id: int) -> int:
        """Delete every routine (and its exercises) of ``program_id``."""
        routine_ids = select(Routine.id).where(Routine.program_id == program_id)
        self.session.execute(
            delete(ProgramExercise).where(ProgramExercise.routine_id.in_(routine_ids)),
            execution_options=_SYNC,
        )
        result = self.session.execute(
            delete(Routine).where(Routine.program_id == program_id),
            execution_options=_SYNC,
        )
        return int(result.rowcount or 0)

    def replace_routines(self, program: Program, workout_days: Sequence[Any]) -> list[Routine]:
        """Drop the current routine tree and insert ``workout_days`` in its place."""
        self.clear_routines(program.id)
        self.session.expire(program, ["routines"])
        return self.add_routines(program, workout_days)

    def find_routine(self, program_id: int, routine_id: int) -> Routine | None:
        stmt = select(Routine).where(Routine.id == routine_id, Routine.program_id == program_id)
        return cast(Routine | None, self.session.execute(stmt).scalars().first())

    # ------------------------------- Cascade ---------------------------------

    def delete_cascade(self, program_id: int) -> dict[str, int]:
        """Delete a program and everything hanging off it, children first.

        Order: exercises → routines → logs of its enrollments → enrollments →
        program. The caller's transaction makes the whole sequence atomic.
        """
        routine_ids = select(Routine.id).where(Routine.program_id == program_id)
        enrollment_ids = select(ClientProgram.id).where(ClientProgram.program_id == program_id)

        steps: list[tuple[str, Any]] = [
            (
                "program_exercises",
                delete(ProgramExercise).where(ProgramExercise.routine_id.in_(routine_ids)),
            ),
            ("routines", delete(Routine).where(Routine.program_id == program_id)),
            (
                "workout_logs",
                delete(WorkoutLog).where(WorkoutLog.client_program_id.in_(enrollment_ids)),
            ),
            ("meal_logs", delete(MealLog).where(MealLog.client_program_id.in_(enrollment_ids))),
            ("client_programs", delete(ClientProgram).where(ClientProgram.program_id == program_id)),
            ("programs", delete(Program).where(Program.id == program_id)),
        ]
        counts: dict[str, int] = {}
        for table, stmt in steps:
            counts[table] = int(self.session.execute(stmt, execution_options=_SYNC).rowcount or 0)
        return counts
