import pytest
from sqlalchemy import update

from fitcoach.models.enrollment import ClientProgram
from fitcoach.services._shared.errors import (
    AlreadyEnrolledError,
    AuthorizationError,
    NotFoundError,
    ValidationFailedError,
)
from fitcoach.repositories.enrollment import ClientProgramRepository
from fitcoach.services.enrollments import CustomizationIn, EnrollmentService
from tests.factories.enrollment import ClientProgramFactory
from tests.factories.program import (
    DietProgramFactory,
    PosingProgramFactory,
    ProgramExerciseFactory,
    ProgramFactory,
    RoutineFactory,
)
from tests.factories.user import ClientFactory, CoachFactory

CUSTOM_ROUTINE = {
    "id": "custom-1",
    "name": "Home Day",
    "order_in_cycle": 1,
    "exercises": [
        {"id": "push-up", "name": "Push Up", "sets": 3, "reps": "20", "order_in_routine": 1}
    ],
}


@pytest.fixture()
def service() -> EnrollmentService:
    return EnrollmentService()


class TestEnroll:
    def test_enrollment_references_the_live_template(self, service, ctx_for):
        program = ProgramFactory(name="Hypertrophy")
        routine = RoutineFactory(program=program, name="Legs", order_in_cycle=1)
        ProgramExerciseFactory(routine=routine, name="Squat", order_in_routine=1)
        client = ClientFactory()

        out = service.enroll(ctx_for(client), program.id)

        assert out.active is True
        assert out.version == 1
        assert out.name == "Hypertrophy"
        assert out.customized == []
        assert [r.name for r in out.routines] == ["Legs"]
        assert out.progress.streak == 0 and out.progress.completed == []

    def test_second_active_enrollment_is_rejected(self, service, session, ctx_for):
        program = ProgramFactory()
        client = ClientFactory()
        service.enroll(ctx_for(client), program.id)
        session.commit()

        with pytest.raises(AlreadyEnrolledError):
            service.enroll(ctx_for(client), program.id)
        assert session.query(ClientProgram).filter_by(client_id=client.id).count() == 1

    def test_deactivated_enrollment_frees_the_slot(self, service, ctx_for):
        program = ProgramFactory()
        client = ClientFactory()
        first = service.enroll(ctx_for(client), program.id)
        service.set_active(ctx_for(client), first.id, False)

        second = service.enroll(ctx_for(client), program.id)
        assert second.id != first.id

    def test_coach_cannot_enroll(self, service, ctx_for):
        program = ProgramFactory()
        with pytest.raises(AuthorizationError):
            service.enroll(ctx_for(CoachFactory()), program.id)

    def test_hidden_program_is_not_found(self, service, ctx_for):
        program = ProgramFactory(is_public=False)
        with pytest.raises(NotFoundError):
            service.enroll(ctx_for(ClientFactory()), program.id)


class TestQueries:
    def test_list_only_returns_own_enrollments(self, service, ctx_for):
        mine = ClientProgramFactory()
        ClientProgramFactory()
        inactive = ClientProgramFactory(client=mine.client, active=False)

        all_ids = {e.id for e in service.list(ctx_for(mine.client))}
        active_ids = {e.id for e in service.list(ctx_for(mine.client), active_only=True)}

        assert all_ids == {mine.id, inactive.id}
        assert active_ids == {mine.id}

    def test_get_other_clients_enrollment_is_not_found(self, service, ctx_for):
        enrollment = ClientProgramFactory()
        with pytest.raises(NotFoundError):
            service.get(ctx_for(ClientFactory()), enrollment.id)

    def test_diet_enrollment_exposes_only_meal_plans(self, service, ctx_for):
        enrollment = ClientProgramFactory(program=DietProgramFactory())
        out = service.get(ctx_for(enrollment.client), enrollment.id)
        assert out.routines is None and out.posing_details is None
        assert out.meal_plans[0].meal_name == "Breakfast"


class TestSetActive:
    def test_reactivation_conflicts_with_another_active_enrollment(
        self, service, session, ctx_for
    ):
        old = ClientProgramFactory(active=False)
        ClientProgramFactory(client=old.client, program=old.program)
        session.commit()

        with pytest.raises(AlreadyEnrolledError):
            service.set_active(ctx_for(old.client), old.id, True)
        assert session.get(ClientProgram, old.id).active is False

    def test_deactivation_locks_the_enrollment(self, service, ctx_for, monkeypatch):
        enrollment = ClientProgramFactory()
        calls = []
        original = ClientProgramRepository.get_owned_for_update

        def spy(self, enrollment_id, client_id):
            calls.append((enrollment_id, client_id))
            return original(self, enrollment_id, client_id)

        monkeypatch.setattr(ClientProgramRepository, "get_owned_for_update", spy)
        out = service.set_active(ctx_for(enrollment.client), enrollment.id, False)

        assert out.active is False
        assert calls == [(enrollment.id, enrollment.client_id)]


class TestCustomize:
    def test_override_merges_with_the_stored_customizations(self, service, session, ctx_for):
        enrollment = ClientProgramFactory()
        session.flush()
        session.connection().execute(
            update(ClientProgram.__table__)
            .where(ClientProgram.__table__.c.id == enrollment.id)
            .values(client_program_data={"customizations": {"notes": "Sleep 8h"}, "progress": {}})
        )

        out = service.customize(
            ctx_for(enrollment.client),
            CustomizationIn(enrollment_id=enrollment.id, overrides={"name": "My Plan"}),
        )

        assert sorted(out.customized) == ["name", "notes"]

    def test_name_override_leaves_version_alone(self, service, ctx_for):
        enrollment = ClientProgramFactory()
        out = service.customize(
            ctx_for(enrollment.client),
            CustomizationIn(enrollment_id=enrollment.id, overrides={"name": "My Plan"}),
        )
        assert out.name == "My Plan"
        assert out.customized == ["name"]
        assert out.version == 1

    def test_structural_override_bumps_version_and_replaces_routines(self, service, ctx_for):
        enrollment = ClientProgramFactory()
        RoutineFactory(program=enrollment.program, name="Template Day")

        out = service.customize(
            ctx_for(enrollment.client),
            CustomizationIn(enrollment_id=enrollment.id, overrides={"routines": [CUSTOM_ROUTINE]}),
        )

        assert out.version == 2
        assert [r.name for r in out.routines] == ["Home Day"]
        assert out.routines[0].exercises[0].id == "push-up"

    def test_clear_restores_the_template(self, service, ctx_for):
        enrollment = ClientProgramFactory()
        RoutineFactory(program=enrollment.program, name="Template Day")
        ctx = ctx_for(enrollment.client)
        service.customize(
            ctx, CustomizationIn(enrollment_id=enrollment.id, overrides={"routines": [CUSTOM_ROUTINE]})
        )

        out = service.customize(
            ctx, CustomizationIn(enrollment_id=enrollment.id, clear=("routines",))
        )

        assert out.version == 3
        assert out.customized == []
        assert [r.name for r in out.routines] == ["Template Day"]

    def test_program_coach_may_customize(self, service, ctx_for):
        enrollment = ClientProgramFactory(program=PosingProgramFactory())
        override = {"bio": "Coach", "details": "Side chest", "communication_preference": "video"}

        out = service.customize(
            ctx_for(enrollment.program.coach),
            CustomizationIn(enrollment_id=enrollment.id, overrides={"posing_details": override}),
        )
        assert out.posing_details.communication_preference == "video"

    def test_unrelated_coach_gets_not_found(self, service, ctx_for):
        enrollment = ClientProgramFactory()
        with pytest.raises(NotFoundError):
            service.customize(
                ctx_for(CoachFactory()),
                CustomizationIn(enrollment_id=enrollment.id, overrides={"name": "x"}),
            )

    def test_override_for_foreign_payload_is_rejected(self, service, ctx_for):
        enrollment = ClientProgramFactory()
        with pytest.raises(ValidationFailedError) as exc:
            service.customize(
                ctx_for(enrollment.client),
                CustomizationIn(enrollment_id=enrollment.id, overrides={"meal_plans": []}),
            )
        assert "meal_plans" in exc.value.errors

    def test_unknown_key_is_rejected(self, service, ctx_for):
        enrollment = ClientProgramFactory()
        with pytest.raises(ValidationFailedError) as exc:
            service.customize(
                ctx_for(enrollment.client),
                CustomizationIn(enrollment_id=enrollment.id, overrides={"price": 0}),
            )
        assert "price" in exc.value.errors
