from datetime import UTC, date, datetime, timedelta

from fitcoach.models.enrollment import empty_enrollment_data
from fitcoach.services.logs import fold_workout
from fitcoach.services.logs.progress import next_streak

DAY = datetime(2024, 5, 6, 18, 0, tzinfo=UTC)


def _fresh():
    return empty_enrollment_data()["progress"]


class TestFoldWorkout:
    def test_first_workout(self):
        out = fold_workout(_fresh(), routine_id=3, at=DAY, note="felt strong")

        assert out["completed"] == ["3"]
        assert out["notes"] == [{"date": DAY.isoformat(), "routine_id": 3, "note": "felt strong"}]
        assert out["last_workout"] == DAY.isoformat()
        assert out["streak"] == 1

    def test_completed_is_deduplicated_by_string_id(self):
        progress = fold_workout(_fresh(), routine_id=3, at=DAY)
        progress = fold_workout(progress, routine_id="3", at=DAY + timedelta(days=1))
        assert progress["completed"] == ["3"]

    def test_empty_note_is_not_recorded(self):
        assert fold_workout(_fresh(), routine_id=1, at=DAY, note="")["notes"] == []

    def test_input_is_not_mutated(self):
        progress = _fresh()
        fold_workout(progress, routine_id=1, at=DAY, note="x")
        assert progress == _fresh()

    def test_backdated_log_keeps_last_workout(self):
        progress = fold_workout(_fresh(), routine_id=1, at=DAY)
        progress = fold_workout(progress, routine_id=2, at=DAY - timedelta(days=3))
        assert progress["last_workout"] == DAY.isoformat()
        assert progress["completed"] == ["1", "2"]

    def test_missing_progress_starts_fresh(self):
        out = fold_workout(None, routine_id="r1", at=DAY)
        assert out["completed"] == ["r1"]
        assert out["streak"] == 1


class TestNextStreak:
    def test_consecutive_days_extend(self):
        assert next_streak(date(2024, 5, 5), 2, date(2024, 5, 6)) == 3

    def test_same_day_keeps(self):
        assert next_streak(date(2024, 5, 6), 2, date(2024, 5, 6)) == 2

    def test_gap_restarts(self):
        assert next_streak(date(2024, 5, 1), 4, date(2024, 5, 6)) == 1

    def test_backdated_never_shortens(self):
        assert next_streak(date(2024, 5, 6), 4, date(2024, 5, 1)) == 4
