from __future__ import annotations

from fitcoach.models.base import as_utc
from fitcoach.models.user import User
from fitcoach.repositories.user import ProfileRepository

from .dto import UserOut


def user_to_out(row: User) -> UserOut:
    fields = ProfileRepository.COACH_FIELDS if row.is_coach else ProfileRepository.CLIENT_FIELDS
    profile = row.profile
    return UserOut(
        id=row.id,
        uuid=row.uuid,
        username=row.username,
        email=row.email,
        role=row.role,
        full_name=row.full_name,
        phone_number=row.phone_number,
        profile_picture_url=row.profile_picture_url,
        is_public_profile=bool(row.is_public_profile),
        created_at=as_utc(row.created_at),
        profile={key: getattr(profile, key, None) for key in sorted(fields)},
    )
