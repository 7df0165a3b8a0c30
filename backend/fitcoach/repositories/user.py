"""User and profile repository."""

from __future__ import annotations

from typing import Any, cast

from sqlalchemy import select

from fitcoach.models.user import ClientProfile, CoachProfile, User
from fitcoach.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    Never issues tokens or sessions; only DB-level account management.
    """

    model = User

    def _sortable_fields(self):
        return {
            "id": User.id,
            "username": User.username,
            "created_at": User.created_at,
        }

    def _filterable_fields(self):
        return {
            "username": User.username,
            "email": User.email,
            "role": User.role,
        }

    def _updatable_fields(self):
        return {"full_name", "email", "phone_number", "profile_picture_url", "is_public_profile"}

    def get_by_username(self, username: str) -> User | None:
        stmt = select(User).where(User.username == username.strip())
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def exists_by_username(self, username: str) -> bool:
        stmt = select(User.id).where(User.username == username.strip())
        return self.session.execute(stmt).first() is not None

    def exists_by_email(self, email: str, *, exclude_id: int | None = None) -> bool:
        stmt = select(User.id).where(User.email == email.lower().strip())
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        return self.session.execute(stmt).first() is not None

    def authenticate(self, username: str, password: str) -> User | None:
        """Return the user when ``username``/``password`` match, else ``None``."""
        user = self.get_by_username(username)
        if user is None or not user.verify_password(password):
            return None
        return user

    def create_with_profile(self, user: User, profile_fields: dict[str, Any]) -> User:
        """Persist ``user`` together with the profile matching its role."""
        if user.is_coach:
            user.coach_profile = CoachProfile(**profile_fields)
        else:
            user.client_profile = ClientProfile(**profile_fields)
        return self.add(user)


class ProfileRepository(BaseRepository[CoachProfile]):
    """Role-specific profile rows; the model depends on the owner's role."""

    model = CoachProfile

    COACH_FIELDS = frozenset({"bio", "specialties", "certifications", "experience", "social_links"})
    CLIENT_FIELDS = frozenset(
        {
            "bio",
            "height_cm",
            "weight_kg",
            "fitness_goals",
            "medical_conditions",
            "dietary_restrictions",
        }
    )

    def get_or_create_for(self, user: User) -> CoachProfile | ClientProfile:
        """Return the user's profile row, creating an empty one if missing."""
        profile = user.profile
        if profile is not None:
            return profile
        if user.is_coach:
            user.coach_profile = CoachProfile(user_id=user.id)
            profile = user.coach_profile
        else:
            user.client_profile = ClientProfile(user_id=user.id)
            profile = user.client_profile
        self.session.add(profile)
        self.flush()
        return profile

    def apply(self, profile: CoachProfile | ClientProfile, fields: dict[str, Any]) -> None:
        allowed = self.COACH_FIELDS if isinstance(profile, CoachProfile) else self.CLIENT_FIELDS
        for key, value in fields.items():
            if key in allowed:
                setattr(profile, key, value)
        self.flush()
