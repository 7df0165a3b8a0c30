"""Generic repository base and query utilities for SQLAlchemy 2.x.

Persistence-only concerns shared by every repository live here:

- whitelisted sorting with a primary-key tiebreaker so pages are stable,
- pagination with an optional total count,
- eager-loading hooks to avoid N+1 queries,
- update helpers restricted to a per-repository field whitelist.

Repositories never commit or roll back; services own the Unit of Work.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import Select, and_, func, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from fitcoach.core.extensions import db

E = TypeVar("E")  # SQLAlchemy mapped entity type


@dataclass(slots=True)
class Pagination:
    """Pagination input: 1-based ``page``, page size ``limit`` and public sort tokens."""

    page: int
    limit: int
    sort: list[str]


@dataclass(slots=True)
class Page(Generic[E]):
    """Result page with metadata."""

    items: Sequence[E]
    total: int
    page: int
    limit: int


def parse_sort_tokens(raw: Iterable[str]) -> list[tuple[str, bool]]:
    """Turn ``["-created_at", "name"]`` into ``[("created_at", True), ("name", False)]``."""
    parsed: list[tuple[str, bool]] = []
    for token in raw:
        is_desc = token.startswith("-")
        name = (token[1:] if is_desc else token).strip()
        if name:
            parsed.append((name, is_desc))
    return parsed


def apply_sorting(
    stmt: Select[Any],
    sortable_fields: Mapping[str, InstrumentedAttribute[Any]],
    tokens: Iterable[str],
    *,
    pk_attr: InstrumentedAttribute[Any] | None,
) -> Select[Any]:
    """Apply whitelisted ``ORDER BY`` clauses; unknown tokens are ignored.

    :param stmt: Base selectable.
    :param sortable_fields: Public field → ORM attribute mapping.
    :param tokens: Public sort tokens.
    :param pk_attr: Primary key appended as the final ascending tiebreaker.
    :returns: Ordered select.
    """
    orders: list[Any] = []
    for name, is_desc in parse_sort_tokens(tokens):
        col = sortable_fields.get(name)
        if isinstance(col, InstrumentedAttribute):
            orders.append(col.desc() if is_desc else col.asc())

    if orders:
        stmt = stmt.order_by(*orders)
    if pk_attr is not None:
        stmt = stmt.order_by(pk_attr.asc())
    return stmt


def paginate_select(
    session: Session,
    stmt: Select[Any],
    *,
    page: int,
    limit: int,
    with_total: bool = True,
) -> tuple[list[Any], int]:
    """Execute ``stmt`` for one page and optionally count all matching rows.

    The count query drops ``ORDER BY`` since ordering does not affect it.
    """
    page = max(int(page), 1)
    limit = max(int(limit), 1)

    total = 0
    if with_total:
        count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
        total = int(session.execute(count_stmt).scalar_one())

    sliced = stmt.limit(limit).offset((page - 1) * limit)
    items = list(session.execute(sliced).scalars().all())
    return items, total


class BaseRepository(Generic[E]):
    """Persistence-only repository for a single aggregate.

    Subclasses set ``model`` and may override ``_sortable_fields``,
    ``_filterable_fields``, ``_updatable_fields`` and ``_default_eagerload``.
    """

    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        self._session: Session | None = session

    @property
    def session(self) -> Session:
        """Injected session, or the Flask-scoped one when none was given."""
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    # ------------------------------ Extensibility ----------------------------

    def _default_eagerload(self, stmt: Select[Any]) -> Select[Any]:
        return stmt

    def _pk_attr(self) -> InstrumentedAttribute[Any] | None:
        return getattr(self.model, "id", None)

    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {}

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {}

    def _updatable_fields(self) -> set[str]:
        return set()

    # ------------------------------ Internals --------------------------------

    def _apply_equality_filters(
        self,
        stmt: Select[Any],
        filters: Mapping[str, Any] | None,
    ) -> Select[Any]:
        """Apply ``column == value`` for whitelisted keys; ``None`` values are skipped."""
        if not filters:
            return stmt
        allowed = self._filterable_fields()
        clauses: list[Any] = []
        for key, value in filters.items():
            col = allowed.get(key)
            if isinstance(col, InstrumentedAttribute) and value is not None:
                clauses.append(col == value)
        return stmt.where(and_(*clauses)) if clauses else stmt

    def _sanitize_update_fields(
        self,
        fields: Mapping[str, Any],
        *,
        strict: bool = True,
    ) -> dict[str, Any]:
        """Keep only whitelisted keys.

        :raises ValueError: If ``strict`` and unknown keys are present.
        """
        allowed = self._updatable_fields()
        unknown = [k for k in fields if k not in allowed]
        if unknown and strict:
            raise ValueError(f"Unknown or non-updatable fields: {unknown}")
        return {k: v for k, v in fields.items() if k in allowed}

    # --------------------------------- CRUD ----------------------------------

    def add(self, instance: E) -> E:
        """Stage a new entity and flush so its primary key is populated."""
        self.session.add(instance)
        self.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        pk_attr = self._pk_attr()
        if pk_attr is None:
            raise RuntimeError("BaseRepository.get requires a detectable PK attribute.")
        stmt = self._default_eagerload(select(self.model).where(pk_attr == entity_id))
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def get_for_update(self, entity_id: Any) -> E | None:
        """Fetch by PK with ``FOR UPDATE`` (ignored by SQLite)."""
        pk_attr = self._pk_attr()
        if pk_attr is None:
            raise RuntimeError("BaseRepository.get_for_update requires a detectable PK.")
        stmt = self._default_eagerload(
            select(self.model).where(pk_attr == entity_id)
        ).with_for_update().execution_options(populate_existing=True)
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def find_one(self, **filters: Any) -> E | None:
        stmt = self._apply_equality_filters(select(self.model), filters)
        stmt = self._default_eagerload(stmt)
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def exists(self, **filters: Any) -> bool:
        stmt = self._apply_equality_filters(select(func.count()).select_from(self.model), filters)
        return bool(self.session.execute(stmt).scalar())

    def delete(self, instance: E) -> None:
        self.session.delete(instance)
        self.flush()

    def flush(self) -> None:
        self.session.flush()

    def assign_updates(
        self,
        instance: E,
        fields: Mapping[str, Any],
        *,
        strict: bool = True,
        flush: bool = True,
    ) -> E:
        """Assign whitelisted keys through ``setattr`` so ``@validates`` hooks run."""
        for key, value in self._sanitize_update_fields(fields, strict=strict).items():
            setattr(instance, key, value)
        if flush:
            self.flush()
        return instance

    # ------------------------------- Listing ---------------------------------

    def list(
        self,
        *,
        filters: Mapping[str, Any] | None = None,
        sort: Iterable[str] | None = None,
        limit: int | None = None,
    ) -> list[E]:
        stmt = self._apply_equality_filters(select(self.model), filters)
        stmt = self._default_eagerload(stmt)
        stmt = apply_sorting(stmt, self._sortable_fields(), sort or [], pk_attr=self._pk_attr())
        if limit is not None:
            stmt = stmt.limit(int(limit))
        return cast(list[E], list(self.session.execute(stmt).scalars().all()))

    def paginate_stmt(
        self, stmt: Select[Any], pagination: Pagination, *, with_total: bool = True
    ) -> Page[E]:
        """Sort and paginate a prepared select using this repository's whitelist."""
        stmt = apply_sorting(
            self._default_eagerload(stmt),
            self._sortable_fields(),
            pagination.sort,
            pk_attr=self._pk_attr(),
        )
        items, total = paginate_select(
            self.session,
            stmt,
            page=pagination.page,
            limit=pagination.limit,
            with_total=with_total,
        )
        return Page(
            items=cast(list[E], items),
            total=total,
            page=pagination.page,
            limit=pagination.limit,
        )

    def paginate(
        self,
        pagination: Pagination,
        *,
        filters: Mapping[str, Any] | None = None,
        with_total: bool = True,
    ) -> Page[E]:
        stmt = self._apply_equality_filters(select(self.model), filters)
        return self.paginate_stmt(stmt, pagination, with_total=with_total)
