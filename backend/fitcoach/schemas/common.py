"""Common Marshmallow schemas shared across resources."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, fields, post_load, validate


class PaginationQuerySchema(Schema):
    """Parse ``page``, ``limit`` and a comma-separated ``sort`` query string."""

    class Meta:
        unknown = EXCLUDE

    def __init__(self, *, default_limit: int = 20, max_limit: int = 100, **kwargs: Any) -> None:
        self._default_limit = default_limit
        self._max_limit = max_limit
        super().__init__(**kwargs)

    page = fields.Integer(load_default=1, validate=validate.Range(min=1))
    limit = fields.Integer(validate=validate.Range(min=1))
    sort = fields.String(load_default="")

    @post_load
    def apply_defaults(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        raw = data.get("sort") or ""
        data["sort"] = [segment.strip() for segment in raw.split(",") if segment.strip()]
        limit = data.get("limit", self._default_limit)
        data["limit"] = min(max(limit, 1), self._max_limit)
        return data


class MetaSchema(Schema):
    """Metadata block for paginated responses."""

    total = fields.Integer(required=True)
    page = fields.Integer(required=True)
    limit = fields.Integer(required=True)
    has_prev = fields.Boolean()
    has_next = fields.Boolean()


def build_meta(meta: Any) -> dict[str, Any]:
    """Serialize a :class:`~fitcoach.services._shared.dto.PageMeta`."""
    return MetaSchema().dump(meta)
