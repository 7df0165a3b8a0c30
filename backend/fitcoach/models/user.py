"""Account identity and role-specific profiles."""

from __future__ import annotations

from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    Enum,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates
from werkzeug.security import check_password_hash, generate_password_hash

from fitcoach.core.extensions import db

from .base import ExternalIdMixin, PKMixin, ReprMixin, TimestampMixin

ROLE_CLIENT = "client"
ROLE_COACH = "coach"
USER_ROLES = (ROLE_CLIENT, ROLE_COACH)

UserRole = Enum(*USER_ROLES, name="user_role")


class User(PKMixin, ExternalIdMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Authentication identity and shared profile fields.

    Fields
    ------
    username : str
        Login handle. Unique, stored trimmed.
    email : str | None
        Optional contact email, stored normalized (lowercase, trimmed).
    password_hash : str
        Hashed password (write-only setter via ``password``).
    role : str
        ``client`` or ``coach``. Fixed at registration.
    """

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(80), nullable=False)
    email: Mapped[str | None] = mapped_column(String(254), nullable=True)
    password_hash: Mapped[str] = mapped_column(String(254), nullable=False)
    role: Mapped[str] = mapped_column(UserRole, nullable=False, server_default=ROLE_CLIENT)
    full_name: Mapped[str | None] = mapped_column(String(120))
    phone_number: Mapped[str | None] = mapped_column(String(40))
    profile_picture_url: Mapped[str | None] = mapped_column(String(500))
    is_public_profile: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default="1"
    )

    __table_args__ = (
        UniqueConstraint("username", name="uq_users_username"),
        UniqueConstraint("email", name="uq_users_email"),
        Index("ix_users_role", "role"),
    )

    coach_profile: Mapped[CoachProfile | None] = relationship(
        "CoachProfile",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    client_profile: Mapped[ClientProfile | None] = relationship(
        "ClientProfile",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def is_coach(self) -> bool:
        return self.role == ROLE_COACH

    @property
    def profile(self) -> CoachProfile | ClientProfile | None:
        """Return the role-specific profile row."""
        return self.coach_profile if self.is_coach else self.client_profile

    # -------------------- Password API --------------------
    @property
    def password(self) -> Any:  # pragma: no cover - explicit write-only contract
        raise AttributeError("Password is write-only.")

    @password.setter
    def password(self, raw: str) -> None:
        if not isinstance(raw, str) or not raw:
            raise ValueError("Password must be a non-empty string.")
        self.password_hash = generate_password_hash(raw)

    def verify_password(self, raw: str) -> bool:
        """Return ``True`` when ``raw`` matches the stored hash."""
        if not self.password_hash:
            return False
        return bool(check_password_hash(self.password_hash, raw))

    # -------------------- Validators --------------------
    @validates("email")
    def _normalize_email(self, key: str, value: str | None) -> str | None:
        if value is None:
            return None
        v = value.strip().lower()
        if not v:
            return None
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Email format looks invalid.")
        return v

    @validates("username")
    def _normalize_username(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Username is required.")
        return value.strip()

    @validates("role")
    def _check_role(self, key: str, value: str) -> str:
        if value not in USER_ROLES:
            raise ValueError(f"Unknown role: {value!r}")
        current = self.__dict__.get("role")
        if current is not None and current != value:
            raise ValueError("Role cannot change after registration.")
        return value


class CoachProfile(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """Coach-only profile extension (one-to-one with :class:`User`)."""

    __tablename__ = "coach_profiles"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    bio: Mapped[str | None] = mapped_column(Text)
    specialties: Mapped[str | None] = mapped_column(Text)
    certifications: Mapped[str | None] = mapped_column(Text)
    experience: Mapped[str | None] = mapped_column(Text)
    social_links: Mapped[dict[str, Any] | None] = mapped_column(JSON)

    user: Mapped[User] = relationship("User", back_populates="coach_profile")


class ClientProfile(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """Client-only profile extension (one-to-one with :class:`User`)."""

    __tablename__ = "client_profiles"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    bio: Mapped[str | None] = mapped_column(Text)
    height_cm: Mapped[float | None] = mapped_column(Numeric(5, 1, asdecimal=False))
    weight_kg: Mapped[float | None] = mapped_column(Numeric(5, 1, asdecimal=False))
    fitness_goals: Mapped[str | None] = mapped_column(Text)
    medical_conditions: Mapped[str | None] = mapped_column(Text)
    dietary_restrictions: Mapped[str | None] = mapped_column(Text)

    user: Mapped[User] = relationship("User", back_populates="client_profile")
