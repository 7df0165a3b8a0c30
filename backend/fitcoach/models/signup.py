"""Beta programme lead capture."""

from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, validates

from fitcoach.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin


class BetaSignup(PKMixin, TimestampMixin, ReprMixin, db.Model):
    """Standalone lead record; no relationships."""

    __tablename__ = "beta_signups"

    first_name: Mapped[str] = mapped_column(String(80), nullable=False)
    last_name: Mapped[str] = mapped_column(String(80), nullable=False)
    email: Mapped[str] = mapped_column(String(254), nullable=False)

    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        return value.strip().lower()
