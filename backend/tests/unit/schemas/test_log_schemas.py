from datetime import UTC

import pytest
from marshmallow import ValidationError

from fitcoach.schemas import (
    EnrollmentPatchSchema,
    MealLogCreateSchema,
    MealLogUpdateSchema,
    WorkoutLogCreateSchema,
)


class TestWorkoutLogCreateSchema:
    def test_loads_entries_and_naive_date_as_utc(self):
        data = WorkoutLogCreateSchema().load(
            {
                "enrollment_id": 4,
                "routine_id": "12",
                "exercise_logs": [{"exercise_id": 3, "sets": [{"reps": 5, "weight": 100}]}],
                "date": "2024-03-04T18:00:00",
            }
        )
        assert data["routine_id"] == "12"
        assert data["exercise_logs"][0]["sets"][0] == {"reps": 5, "weight": 100}
        assert data["date"].tzinfo == UTC

    def test_bodyweight_set_has_no_weight(self):
        data = WorkoutLogCreateSchema().load(
            {"enrollment_id": 1, "routine_id": 1, "exercise_logs": [{"exercise_id": 1, "sets": [{"reps": 12}]}]}
        )
        assert data["exercise_logs"][0]["sets"][0]["weight"] is None

    @pytest.mark.parametrize("reps", ["5", True, -1])
    def test_reps_must_be_a_non_negative_number(self, reps):
        with pytest.raises(ValidationError) as exc:
            WorkoutLogCreateSchema().load(
                {
                    "enrollment_id": 1,
                    "routine_id": 1,
                    "exercise_logs": [{"exercise_id": 1, "sets": [{"reps": reps}]}],
                }
            )
        assert "exercise_logs" in exc.value.messages

    def test_routine_id_is_required(self):
        with pytest.raises(ValidationError) as exc:
            WorkoutLogCreateSchema().load({"enrollment_id": 1})
        assert "routine_id" in exc.value.messages


class TestMealLogSchemas:
    def test_missing_macros_default_to_zero(self):
        data = MealLogUpdateSchema().load({"calories": 350.5})
        assert data["calories"] == 350.5
        assert data["protein"] == data["carbs"] == data["fats"] == 0

    def test_create_requires_enrollment(self):
        with pytest.raises(ValidationError) as exc:
            MealLogCreateSchema().load({"calories": 100})
        assert "enrollment_id" in exc.value.messages

    def test_negative_macro_rejected(self):
        with pytest.raises(ValidationError):
            MealLogCreateSchema().load({"enrollment_id": 1, "fats": -3})

    def test_macro_upper_bound(self):
        with pytest.raises(ValidationError) as exc:
            MealLogCreateSchema().load({"enrollment_id": 1, "calories": 1e30, "carbs": 100_000})
        assert set(exc.value.messages) == {"calories"}


def test_enrollment_patch_defaults_clear_to_empty():
    data = EnrollmentPatchSchema().load({"active": False, "unknown": 1})
    assert data == {"active": False, "clear": []}
