from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import update

from fitcoach.models.enrollment import ClientProgram
from fitcoach.models.logs import MealLog, WorkoutLog
from fitcoach.services._shared.errors import NotFoundError, ValidationFailedError
from fitcoach.services.logs import (
    MAX_MACRO,
    UNKNOWN_EXERCISE,
    ExerciseEntryIn,
    LogService,
    MealLogIn,
    MealLogUpdateIn,
    SetIn,
    WorkoutLogIn,
    WorkoutLogUpdateIn,
)
from fitcoach.services.programs import ProgramService, ProgramUpdateIn
from tests.factories.enrollment import ClientProgramFactory, MealLogFactory, WorkoutLogFactory
from tests.factories.program import ProgramExerciseFactory, RoutineFactory
from tests.factories.user import ClientFactory


@pytest.fixture()
def service() -> LogService:
    return LogService()


@pytest.fixture()
def enrolled():
    """An enrollment whose program has one routine with one exercise."""
    enrollment = ClientProgramFactory()
    routine = RoutineFactory(program=enrollment.program, name="Push", order_in_cycle=1)
    exercise = ProgramExerciseFactory(routine=routine, name="Bench Press", order_in_routine=1)
    return enrollment, routine, exercise


def _entry(exercise_id, *sets):
    return ExerciseEntryIn(
        exercise_id=exercise_id, sets=tuple(SetIn(reps=r, weight=w) for w, r in sets)
    )


class TestLogWorkout:
    def test_names_are_baked_in_and_progress_folded(self, service, session, ctx_for, enrolled):
        enrollment, routine, exercise = enrolled
        at = datetime(2024, 3, 4, 18, 0, tzinfo=UTC)

        out = service.log_workout(
            ctx_for(enrollment.client),
            WorkoutLogIn(
                enrollment_id=enrollment.id,
                routine_id=routine.id,
                exercise_logs=(_entry(exercise.id, (100, 5)), _entry(9999, (None, 10))),
                notes="felt strong",
                date=at,
            ),
        )

        assert out.routine_id == str(routine.id)
        assert out.routine_name == "Push"
        assert [e["exercise_name"] for e in out.exercise_logs] == ["Bench Press", UNKNOWN_EXERCISE]
        assert out.exercise_logs[0]["sets"] == [{"weight": 100, "reps": 5}]

        progress = session.get(ClientProgram, enrollment.id).progress
        assert progress["completed"] == [str(routine.id)]
        assert progress["streak"] == 1
        assert progress["notes"][0]["note"] == "felt strong"
        assert progress["last_workout"].startswith("2024-03-04")

    def test_string_routine_id_matches_template_routine(self, service, ctx_for, enrolled):
        enrollment, routine, _ = enrolled
        out = service.log_workout(
            ctx_for(enrollment.client),
            WorkoutLogIn(enrollment_id=enrollment.id, routine_id=str(routine.id)),
        )
        assert out.routine_name == "Push"

    def test_unknown_routine_is_not_found(self, service, session, ctx_for, enrolled):
        enrollment, _, _ = enrolled
        session.commit()

        with pytest.raises(NotFoundError):
            service.log_workout(
                ctx_for(enrollment.client),
                WorkoutLogIn(enrollment_id=enrollment.id, routine_id="nope"),
            )
        assert session.query(WorkoutLog).count() == 0

    def test_other_clients_enrollment_is_not_found(self, service, ctx_for, enrolled):
        enrollment, routine, _ = enrolled
        with pytest.raises(NotFoundError):
            service.log_workout(
                ctx_for(ClientFactory()),
                WorkoutLogIn(enrollment_id=enrollment.id, routine_id=routine.id),
            )

    def test_consecutive_days_extend_the_streak(self, service, session, ctx_for, enrolled):
        enrollment, routine, _ = enrolled
        ctx = ctx_for(enrollment.client)
        day = datetime(2024, 3, 4, 7, 0, tzinfo=UTC)
        for offset in (0, 0, 1, 2):
            service.log_workout(
                ctx,
                WorkoutLogIn(
                    enrollment_id=enrollment.id,
                    routine_id=routine.id,
                    date=day + timedelta(days=offset),
                ),
            )

        progress = session.get(ClientProgram, enrollment.id).progress
        assert progress["streak"] == 3
        assert progress["completed"] == [str(routine.id)]

    def test_names_survive_routine_replacement(self, service, ctx_for, enrolled):
        enrollment, routine, exercise = enrolled
        client_ctx = ctx_for(enrollment.client)
        logged = service.log_workout(
            client_ctx,
            WorkoutLogIn(
                enrollment_id=enrollment.id,
                routine_id=routine.id,
                exercise_logs=(_entry(exercise.id, (60, 8)),),
            ),
        )

        ProgramService().update(
            ctx_for(enrollment.program.coach),
            ProgramUpdateIn(
                program_id=enrollment.program_id,
                workout_days=[{"name": "New", "exercises": []}],
            ),
        )

        history = service.workout_history(client_ctx, enrollment.id)
        assert history[0].id == logged.id
        assert history[0].routine_name == "Push"
        assert history[0].exercise_logs[0]["exercise_name"] == "Bench Press"


    def test_fold_starts_from_the_stored_progress(self, service, session, ctx_for, enrolled):
        """A progress write committed after the enrollment was loaded is kept."""
        enrollment, routine, _ = enrolled
        other = RoutineFactory(program=enrollment.program, name="Pull", order_in_cycle=2)
        session.flush()

        session.connection().execute(
            update(ClientProgram.__table__)
            .where(ClientProgram.__table__.c.id == enrollment.id)
            .values(client_program_data={"progress": {"completed": [str(other.id)]}})
        )

        service.log_workout(
            ctx_for(enrollment.client),
            WorkoutLogIn(enrollment_id=enrollment.id, routine_id=routine.id),
        )

        completed = session.get(ClientProgram, enrollment.id).progress["completed"]
        assert completed == [str(other.id), str(routine.id)]

    def test_enrollment_is_locked_for_the_fold(self, service, ctx_for, enrolled, monkeypatch):
        from fitcoach.repositories.enrollment import ClientProgramRepository

        enrollment, routine, _ = enrolled
        calls = []
        original = ClientProgramRepository.get_owned_for_update

        def spy(self, enrollment_id, client_id):
            calls.append(enrollment_id)
            return original(self, enrollment_id, client_id)

        monkeypatch.setattr(ClientProgramRepository, "get_owned_for_update", spy)
        service.log_workout(
            ctx_for(enrollment.client),
            WorkoutLogIn(enrollment_id=enrollment.id, routine_id=routine.id),
        )
        assert calls == [enrollment.id]


class TestUpdateAndDeleteWorkout:
    def test_update_keeps_previous_names_for_removed_exercises(self, service, ctx_for):
        enrollment = ClientProgramFactory()
        log = WorkoutLogFactory(enrollment=enrollment, routine_id="gone")
        out = service.update_workout_log(
            ctx_for(enrollment.client),
            WorkoutLogUpdateIn(
                log_id=log.id,
                exercise_logs=(_entry(1, (110, 3)), _entry(2, (20, 12))),
                notes="heavier",
            ),
        )
        assert [e["exercise_name"] for e in out.exercise_logs] == ["Bench Press", UNKNOWN_EXERCISE]
        assert out.routine_name == "Day 1"
        assert out.notes == "heavier"

    def test_delete_keeps_progress(self, service, session, ctx_for, enrolled):
        enrollment, routine, _ = enrolled
        ctx = ctx_for(enrollment.client)
        out = service.log_workout(
            ctx, WorkoutLogIn(enrollment_id=enrollment.id, routine_id=routine.id)
        )

        service.delete_workout_log(ctx, out.id)

        assert session.get(WorkoutLog, out.id) is None
        assert session.get(ClientProgram, enrollment.id).progress["completed"] == [str(routine.id)]

    def test_cannot_touch_someone_elses_log(self, service, session, ctx_for):
        log = WorkoutLogFactory()
        stranger = ClientFactory()
        session.commit()

        with pytest.raises(NotFoundError):
            service.delete_workout_log(ctx_for(stranger), log.id)
        assert session.get(WorkoutLog, log.id) is not None

    def test_history_is_newest_first(self, service, ctx_for):
        enrollment = ClientProgramFactory()
        now = datetime.now(UTC)
        older = WorkoutLogFactory(enrollment=enrollment, date=now - timedelta(days=2))
        newer = WorkoutLogFactory(enrollment=enrollment, date=now)

        history = service.workout_history(ctx_for(enrollment.client), enrollment.id)
        assert [h.id for h in history] == [newer.id, older.id]


class TestMeals:
    def test_macros_are_rounded_half_up(self, service, ctx_for):
        enrollment = ClientProgramFactory()
        out = service.log_meal(
            ctx_for(enrollment.client),
            MealLogIn(enrollment_id=enrollment.id, calories=499.5, protein=30.4, carbs=0.5),
        )
        assert (out.calories, out.protein, out.carbs, out.fats) == (500, 30, 1, 0)

    def test_update_replaces_everything(self, service, ctx_for):
        enrollment = ClientProgramFactory()
        log = MealLogFactory(enrollment=enrollment)
        out = service.update_meal_log(
            ctx_for(enrollment.client), MealLogUpdateIn(log_id=log.id, calories=300, notes="late")
        )
        assert (out.calories, out.protein, out.carbs, out.fats) == (300, 0, 0, 0)
        assert out.notes == "late"

    def test_delete(self, service, session, ctx_for):
        enrollment = ClientProgramFactory()
        log = MealLogFactory(enrollment=enrollment)
        service.delete_meal_log(ctx_for(enrollment.client), log.id)
        assert session.get(MealLog, log.id) is None

    def test_history_for_foreign_enrollment_is_not_found(self, service, ctx_for):
        enrollment = ClientProgramFactory()
        with pytest.raises(NotFoundError):
            service.meal_history(ctx_for(ClientFactory()), enrollment.id)

    def test_macro_above_the_bound_is_rejected(self, service, session, ctx_for):
        enrollment = ClientProgramFactory()
        session.commit()

        with pytest.raises(ValidationFailedError) as exc_info:
            service.log_meal(
                ctx_for(enrollment.client),
                MealLogIn(enrollment_id=enrollment.id, calories=1e30, fats=MAX_MACRO + 1),
            )
        assert set(exc_info.value.errors) == {"calories", "fats"}
        assert session.query(MealLog).count() == 0

    def test_update_rejects_non_finite_macro(self, service, ctx_for):
        enrollment = ClientProgramFactory()
        log = MealLogFactory(enrollment=enrollment)
        with pytest.raises(ValidationFailedError) as exc_info:
            service.update_meal_log(
                ctx_for(enrollment.client),
                MealLogUpdateIn(log_id=log.id, protein=float("nan")),
            )
        assert list(exc_info.value.errors) == ["protein"]
