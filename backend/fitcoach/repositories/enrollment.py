"""Enrollment (client program) repository."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, cast

from sqlalchemy import select
from sqlalchemy.orm import InstrumentedAttribute

from fitcoach.models.enrollment import ClientProgram
from fitcoach.models.program import Program
from fitcoach.repositories.base import BaseRepository


class ClientProgramRepository(BaseRepository[ClientProgram]):
    """Persist :class:`ClientProgram` rows; every read is client-scoped."""

    model = ClientProgram

    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {"start_date": ClientProgram.start_date, "id": ClientProgram.id}

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {
            "client_id": ClientProgram.client_id,
            "program_id": ClientProgram.program_id,
            "active": ClientProgram.active,
        }

    def find_active(self, client_id: int, program_id: int) -> ClientProgram | None:
        return self.find_one(client_id=client_id, program_id=program_id, active=True)

    def get_owned(self, enrollment_id: int, client_id: int) -> ClientProgram | None:
        """Fetch an enrollment only if it belongs to ``client_id``; active or not."""
        stmt = select(ClientProgram).where(
            ClientProgram.id == enrollment_id, ClientProgram.client_id == client_id
        )
        return cast(ClientProgram | None, self.session.execute(stmt).scalars().first())

    def get_owned_for_update(self, enrollment_id: int, client_id: int) -> ClientProgram | None:
        """Like :meth:`get_owned` but locks the row until the transaction ends."""
        stmt = (
            select(ClientProgram)
            .where(ClientProgram.id == enrollment_id, ClientProgram.client_id == client_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return cast(ClientProgram | None, self.session.execute(stmt).scalars().first())

    def list_for_client(self, client_id: int, *, active_only: bool = False) -> list[ClientProgram]:
        filters: dict[str, Any] = {"client_id": client_id}
        if active_only:
            filters["active"] = True
        return self.list(filters=filters, sort=["-start_date"])

    def list_active_for_programs(self, program_ids: Iterable[int]) -> list[ClientProgram]:
        ids = list(program_ids)
        if not ids:
            return []
        stmt = (
            select(ClientProgram)
            .where(ClientProgram.program_id.in_(ids), ClientProgram.active.is_(True))
            .order_by(ClientProgram.id)
        )
        return list(self.session.execute(stmt).scalars().all())

    def client_is_coached_by(self, client_id: int, coach_id: int) -> bool:
        """True when the client holds any enrollment in one of the coach's programs."""
        stmt = (
            select(ClientProgram.id)
            .join(Program, Program.id == ClientProgram.program_id)
            .where(ClientProgram.client_id == client_id, Program.coach_id == coach_id)
            .limit(1)
        )
        return self.session.execute(stmt).first() is not None
