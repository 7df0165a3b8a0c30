"""Tests for Program and ClientProgram persistence rules."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from fitcoach.models.enrollment import ClientProgram, empty_enrollment_data
from tests.factories.enrollment import ClientProgramFactory
from tests.factories.program import ProgramFactory


class TestProgramEtag:
    def test_etag_tracks_updated_at(self):
        program = ProgramFactory()
        before = program.compute_etag()

        program.updated_at = datetime.now(UTC) + timedelta(seconds=1)
        assert program.compute_etag() != before

    def test_etag_is_stable_without_changes(self):
        program = ProgramFactory()
        assert program.compute_etag() == program.compute_etag()

    def test_uuid_is_assigned(self):
        assert ProgramFactory().uuid


class TestActiveEnrollmentIndex:
    def test_two_active_rows_for_the_same_pair_are_rejected(self, session):
        first = ClientProgramFactory()
        session.commit()

        session.add(
            ClientProgram(
                client_id=first.client_id,
                program_id=first.program_id,
                active=True,
                client_program_data=empty_enrollment_data(),
            )
        )
        with pytest.raises(IntegrityError):
            session.commit()

    def test_inactive_rows_do_not_count(self, session):
        first = ClientProgramFactory(active=False)
        ClientProgramFactory(client=first.client, program=first.program, active=False)
        ClientProgramFactory(client=first.client, program=first.program, active=True)
        session.commit()

        count = session.query(ClientProgram).filter_by(client_id=first.client_id).count()
        assert count == 3

    def test_progress_starts_empty(self):
        enrollment = ClientProgramFactory()
        assert enrollment.progress == {
            "completed": [],
            "notes": [],
            "last_workout": None,
            "streak": 0,
        }
        assert enrollment.customizations == {}
