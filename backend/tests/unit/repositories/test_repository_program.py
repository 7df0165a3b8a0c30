"""Unit tests for ProgramRepository."""

import pytest

from fitcoach.models.enrollment import ClientProgram
from fitcoach.models.program import Program, ProgramExercise, Routine
from fitcoach.repositories import Pagination, ProgramRepository
from fitcoach.services.programs.payloads import ExerciseDraft, WorkoutDayDraft
from tests.factories.enrollment import ClientProgramFactory, MealLogFactory, WorkoutLogFactory
from tests.factories.program import ProgramExerciseFactory, ProgramFactory, RoutineFactory
from tests.factories.user import CoachFactory


class TestProgramRepository:
    @pytest.fixture()
    def repo(self):
        return ProgramRepository()

    def test_add_routines_positions_from_one(self, repo, session):
        program = ProgramFactory()
        days = [
            WorkoutDayDraft(
                name="A",
                exercises=(
                    ExerciseDraft(name="Squat", sets=5, reps="5"),
                    ExerciseDraft(name="Lunge", sets=3, reps="10"),
                ),
            ),
            WorkoutDayDraft(name="B"),
        ]

        created = repo.add_routines(program, days)

        assert [r.order_in_cycle for r in created] == [1, 2]
        assert [e.order_in_routine for e in created[0].exercises] == [1, 2]
        assert session.query(ProgramExercise).count() == 2

    def test_replace_routines_drops_old_rows(self, repo, session):
        program = ProgramFactory()
        old = RoutineFactory(program=program)
        ProgramExerciseFactory(routine=old)

        repo.replace_routines(program, [WorkoutDayDraft(name="Only")])

        names = [r.name for r in session.query(Routine).filter_by(program_id=program.id)]
        assert names == ["Only"]
        assert session.query(ProgramExercise).count() == 0

    def test_delete_cascade_counts(self, repo, session):
        program = ProgramFactory()
        routine = RoutineFactory(program=program)
        ProgramExerciseFactory(routine=routine)
        enrollment = ClientProgramFactory(program=program)
        WorkoutLogFactory(enrollment=enrollment)
        WorkoutLogFactory(enrollment=enrollment)
        MealLogFactory(enrollment=enrollment)
        untouched = ClientProgramFactory()
        WorkoutLogFactory(enrollment=untouched)

        counts = repo.delete_cascade(program.id)

        assert counts == {
            "program_exercises": 1,
            "routines": 1,
            "workout_logs": 2,
            "meal_logs": 1,
            "client_programs": 1,
            "programs": 1,
        }
        assert session.get(ClientProgram, untouched.id) is not None
        assert session.query(Program).count() == 1

    def test_list_visible_and_filters(self, repo):
        coach = CoachFactory()
        own_private = ProgramFactory(coach=coach, is_public=False)
        public = ProgramFactory(type="diet")
        ProgramFactory(is_public=False)
        ProgramFactory(status="archived")

        page = repo.list_visible(
            viewer_id=coach.id, pagination=Pagination(page=1, limit=10, sort=["name"])
        )
        assert {p.id for p in page.items} == {own_private.id, public.id}
        assert page.total == 2

        diet = repo.list_visible(
            viewer_id=coach.id,
            pagination=Pagination(page=1, limit=10, sort=[]),
            filters={"type": "diet", "coach_id": None},
        )
        assert [p.id for p in diet.items] == [public.id]

    def test_get_visible(self, repo):
        hidden = ProgramFactory(is_public=False)
        other = CoachFactory()
        assert repo.get_visible(hidden.id, other.id) is None
        assert repo.get_visible(hidden.id, hidden.coach_id) is not None
