import pytest

from fitcoach.models.program import Program
from fitcoach.services._shared.errors import ValidationFailedError
from fitcoach.services.programs.payloads import (
    DietPayload,
    LiftingPayload,
    PosingPayload,
    program_data_for,
    select_payload,
    validate_meal_plan,
    validate_overrides,
    validate_posing_plan,
    validate_program_payload,
    validate_routine,
)

MEAL = {
    "meal_name": "Lunch",
    "target_calories": 700,
    "target_protein": 45.5,
    "target_carbs": 80,
    "target_fats": 20,
    "notes": "",
    "food_suggestions": ["rice", "chicken"],
}

ROUTINE = {
    "id": 7,
    "name": "Push",
    "order_in_cycle": 1,
    "exercises": [
        {"id": "a", "name": "Bench", "sets": 3, "reps": "8-12", "order_in_routine": 1},
    ],
}


class TestMealPlanValidation:
    def test_valid_plan_round_trips_fields(self):
        plan = validate_meal_plan(MEAL)
        assert plan.meal_name == "Lunch"
        assert plan.target_protein == 45.5
        assert plan.food_suggestions == ("rice", "chicken")

    def test_every_failing_field_is_reported(self):
        bad = dict(MEAL, target_calories="700", food_suggestions="rice")
        del bad["notes"]

        with pytest.raises(ValidationFailedError) as exc:
            validate_meal_plan(bad)

        assert set(exc.value.errors) == {"target_calories", "food_suggestions", "notes"}

    def test_boolean_is_not_a_number(self):
        with pytest.raises(ValidationFailedError) as exc:
            validate_meal_plan(dict(MEAL, target_fats=True))
        assert "target_fats" in exc.value.errors


class TestRoutineValidation:
    def test_valid_routine(self):
        routine = validate_routine(ROUTINE)
        assert routine.id == 7
        assert routine.exercises[0].id == "a"
        assert routine.find_exercise("a") is not None

    def test_nested_exercise_errors_use_dotted_paths(self):
        bad = dict(ROUTINE, exercises=[{"id": 1, "name": "Row", "sets": 0, "reps": "10"}])
        with pytest.raises(ValidationFailedError) as exc:
            validate_routine(bad)
        assert "exercises.0.sets" in exc.value.errors
        assert "exercises.0.order_in_routine" in exc.value.errors


class TestPosingPlanValidation:
    def test_unknown_communication_preference(self):
        with pytest.raises(ValidationFailedError) as exc:
            validate_posing_plan({"bio": "b", "details": "d", "communication_preference": "fax"})
        assert list(exc.value.errors) == ["communication_preference"]


class TestProgramPayload:
    def test_unknown_type(self):
        with pytest.raises(ValidationFailedError) as exc:
            validate_program_payload("cardio")
        assert "type" in exc.value.errors

    def test_diet_requires_meal_plans_on_create(self):
        with pytest.raises(ValidationFailedError) as exc:
            validate_program_payload("diet", meal_plans=None)
        assert "meal_plans" in exc.value.errors

    def test_diet_rejects_empty_list(self):
        with pytest.raises(ValidationFailedError):
            validate_program_payload("diet", meal_plans=[])

    def test_diet_errors_carry_item_index(self):
        with pytest.raises(ValidationFailedError) as exc:
            validate_program_payload("diet", meal_plans=[MEAL, dict(MEAL, target_carbs=None)])
        assert "meal_plans.1.target_carbs" in exc.value.errors

    def test_posing_requires_plan_on_create_but_not_on_update(self):
        with pytest.raises(ValidationFailedError) as exc:
            validate_program_payload("posing")
        assert exc.value.errors == {"posing_plan": ["Missing data for required field."]}

        draft = validate_program_payload("posing", partial=True)
        assert draft.posing_plan is None

    def test_sibling_payloads_are_dropped(self):
        draft = validate_program_payload(
            "lifting",
            workout_days=[{"name": "Day 1", "exercises": [{"name": "Squat", "sets": 5, "reps": 5}]}],
            meal_plans=[MEAL],
        )
        assert draft.meal_plans is None
        assert draft.workout_days[0].exercises[0].reps == "5"
        assert program_data_for(draft) == {"schema_version": 1}

    def test_lifting_without_days_is_allowed(self):
        assert validate_program_payload("lifting").workout_days is None


class TestOverrides:
    def test_override_for_other_type_is_rejected(self):
        with pytest.raises(ValidationFailedError) as exc:
            validate_overrides("diet", {"routines": [ROUTINE]})
        assert exc.value.errors["routines"] == ["Not applicable to a diet program."]

    def test_duplicate_order_in_cycle(self):
        other = dict(ROUTINE, id=8, name="Pull")
        with pytest.raises(ValidationFailedError) as exc:
            validate_overrides("lifting", {"routines": [ROUTINE, other]})
        assert "order_in_cycle values must be unique." in exc.value.errors["routines"]

    def test_returns_json_ready_values(self):
        out = validate_overrides("diet", {"meal_plans": [MEAL]})
        assert out["meal_plans"][0]["food_suggestions"] == ["rice", "chicken"]


class TestSelectPayload:
    def test_reads_only_the_branch_of_the_type(self):
        program = Program(
            type="posing",
            program_data={
                "meal_plans": [MEAL],
                "posing_plan": {"bio": "b", "details": "d", "communication_preference": "chat"},
            },
        )
        payload = select_payload("posing", program)
        assert isinstance(payload, PosingPayload)
        assert payload.posing_plan.communication_preference == "chat"

    def test_diet_and_lifting(self):
        diet = select_payload("diet", Program(type="diet", program_data={"meal_plans": [MEAL]}))
        assert isinstance(diet, DietPayload)
        assert diet.meal_plans[0].meal_name == "Lunch"

        lifting = select_payload("lifting", Program(type="lifting", program_data=None))
        assert isinstance(lifting, LiftingPayload)
        assert lifting.routines == ()

    def test_unknown_type_raises(self):
        with pytest.raises(ValueError):
            select_payload("cardio", Program(type="lifting"))
