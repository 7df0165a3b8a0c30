from __future__ import annotations

import pytest

from fitcoach.models.user import User
from fitcoach.services._shared.errors import (
    AuthenticationError,
    ConflictError,
    ValidationFailedError,
)
from fitcoach.services._shared.ports.denylist_store import InMemoryDenylistStore
from fitcoach.services._shared.ports.token_provider import StubTokenProvider
from fitcoach.services.auth.dto import LoginIn, LogoutIn, RegisterIn, TokenOut
from fitcoach.services.auth.service import AuthService
from tests.factories.user import ClientFactory, CoachFactory


# ------------------------------ Fixtures ---------------------------------- #
@pytest.fixture()
def service() -> AuthService:
    """AuthService wired to in-memory doubles."""
    return AuthService(
        token_provider=StubTokenProvider(),
        denylist_store=InMemoryDenylistStore(),
    )


# ------------------------------ Register ---------------------------------- #
def test_register_coach_creates_profile(service, session):
    out = service.register(
        RegisterIn(
            username="coachkim",
            password="longenough",
            role="coach",
            email="Kim@Example.com",
            profile={"specialties": "powerlifting"},
        )
    )
    assert out.role == "coach"
    assert out.profile["specialties"] == "powerlifting"

    user = session.get(User, out.id)
    assert user.verify_password("longenough")
    assert user.coach_profile is not None


def test_register_collects_every_field_error(service):
    with pytest.raises(ValidationFailedError) as exc:
        service.register(
            RegisterIn(
                username=" ",
                password="short",
                role="admin",
                profile={"height_cm": 180},
            )
        )
    assert {"username", "password", "role"} <= set(exc.value.errors)


def test_register_rejects_profile_fields_of_the_other_role(service):
    with pytest.raises(ValidationFailedError) as exc:
        service.register(
            RegisterIn(
                username="newclient",
                password="longenough",
                role="client",
                profile={"certifications": "NASM"},
            )
        )
    assert "profile.certifications" in exc.value.errors


def test_register_duplicate_username(service, session):
    ClientFactory(username="taken")
    session.commit()

    with pytest.raises(ConflictError):
        service.register(RegisterIn(username="taken", password="longenough", role="client"))


# ------------------------------ Tokens ------------------------------------ #
def test_login_issues_token_with_role_claim(service, session):
    user = CoachFactory(username="lifter", password="Sup3rSecret")
    session.flush()

    out = service.login(LoginIn(username="lifter", password="Sup3rSecret"))

    assert isinstance(out, TokenOut)
    assert out.user.id == user.id
    claims = service.tokens.decode(out.access_token)
    assert claims["sub"] == str(user.id)
    assert claims["role"] == "coach"
    assert out.expires_in == 3600


def test_login_invalid_credentials(service, session):
    ClientFactory(username="someone", password="rightpass")
    session.flush()

    with pytest.raises(AuthenticationError):
        service.login(LoginIn(username="someone", password="wrongpass"))
    with pytest.raises(AuthenticationError):
        service.login(LoginIn(username="nobody", password="rightpass"))


def test_logout_revokes_in_denylist(service, session):
    ClientFactory(username="leaving", password="Passw0rd!")
    session.flush()
    token = service.login(LoginIn(username="leaving", password="Passw0rd!")).access_token

    jti = service.tokens.get_jti(token)
    assert service.denylist.is_revoked(jti) is False

    service.logout(LogoutIn(token=token))
    assert service.denylist.is_revoked(jti) is True


def test_whoami(service, ctx_for):
    user = ClientFactory(full_name="Alex Morgan")
    out = service.whoami(ctx_for(user))
    assert out.username == user.username
    assert out.full_name == "Alex Morgan"
