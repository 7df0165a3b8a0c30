"""Unit tests for the log and enrollment repositories."""

from datetime import UTC, datetime, timedelta

import pytest

from fitcoach.repositories import ClientProgramRepository, MealLogRepository, WorkoutLogRepository
from tests.factories.enrollment import ClientProgramFactory, MealLogFactory, WorkoutLogFactory
from tests.factories.program import ProgramFactory


class TestLogRepositories:
    @pytest.fixture()
    def workouts(self):
        return WorkoutLogRepository()

    @pytest.fixture()
    def meals(self):
        return MealLogRepository()

    def test_get_owned_scopes_by_client(self, workouts):
        log = WorkoutLogFactory()
        other = ClientProgramFactory()
        assert workouts.get_owned(log.id, log.client_id) is not None
        assert workouts.get_owned(log.id, other.client_id) is None

    def test_for_client_is_newest_first_and_limited(self, workouts):
        enrollment = ClientProgramFactory()
        now = datetime.now(UTC)
        rows = [
            WorkoutLogFactory(enrollment=enrollment, date=now - timedelta(days=d)) for d in (3, 1, 2)
        ]

        got = workouts.for_client(enrollment.client_id, limit=2)
        assert [r.id for r in got] == [rows[1].id, rows[2].id]

    def test_count_by_enrollment(self, workouts):
        a = ClientProgramFactory()
        b = ClientProgramFactory()
        WorkoutLogFactory(enrollment=a)
        WorkoutLogFactory(enrollment=a)
        WorkoutLogFactory(enrollment=b)

        assert workouts.count_by_enrollment([a.id, b.id]) == {a.id: 2, b.id: 1}
        assert workouts.count_by_enrollment([]) == {}

    def test_macro_totals(self, meals):
        enrollment = ClientProgramFactory()
        MealLogFactory(enrollment=enrollment, calories=400, protein=20)
        MealLogFactory(enrollment=enrollment, calories=600, protein=40)

        assert meals.macro_totals(enrollment.client_id) == {
            "count": 2,
            "calories": 1000,
            "protein": 60,
        }


class TestClientProgramRepository:
    @pytest.fixture()
    def repo(self):
        return ClientProgramRepository()

    def test_find_active_ignores_inactive(self, repo):
        enrollment = ClientProgramFactory(active=False)
        assert repo.find_active(enrollment.client_id, enrollment.program_id) is None

    def test_client_is_coached_by(self, repo):
        enrollment = ClientProgramFactory()
        other = ProgramFactory()
        assert repo.client_is_coached_by(enrollment.client_id, enrollment.program.coach_id)
        assert not repo.client_is_coached_by(enrollment.client_id, other.coach_id)
