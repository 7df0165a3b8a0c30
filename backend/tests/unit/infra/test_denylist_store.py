"""
Denylist stores: the Redis one (on fakeredis) and the in-memory fallback.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import fakeredis
import pytest

from fitcoach.infra.redis.redis_denylist_store import RedisTokenDenylistStore
from fitcoach.services._shared.ports.denylist_store import InMemoryDenylistStore


@pytest.fixture
def fake_redis():
    """Provide a fresh FakeRedis instance for each test."""
    r = fakeredis.FakeRedis()
    r.flushall()
    return r


@pytest.fixture
def store(fake_redis):
    return RedisTokenDenylistStore(r=fake_redis)


def test_revoked_jti_is_reported(store):
    assert store.is_revoked("jti-1") is False
    store.revoke_jti(jti="jti-1", expires_at=datetime.now(UTC) + timedelta(minutes=5))
    assert store.is_revoked("jti-1") is True
    assert store.is_revoked("jti-2") is False


def test_entry_expires_with_the_token(store, fake_redis):
    store.revoke_jti(jti="jti-ttl", expires_at=datetime.now(UTC) + timedelta(seconds=120))
    ttl = fake_redis.ttl("deny:at:jti-ttl")
    assert 0 < ttl <= 120


def test_already_expired_token_gets_minimal_ttl(store, fake_redis):
    store.revoke_jti(jti="old", expires_at=datetime.now(UTC) - timedelta(hours=1))
    assert fake_redis.ttl("deny:at:old") == 1


def test_revoke_is_idempotent(store):
    exp = datetime.now(UTC) + timedelta(minutes=1)
    store.revoke_jti(jti="twice", expires_at=exp)
    store.revoke_jti(jti="twice", expires_at=exp)
    assert store.is_revoked("twice") is True


def test_in_memory_store():
    mem = InMemoryDenylistStore()
    assert mem.is_revoked("a") is False
    mem.revoke_jti(jti="a", expires_at=datetime.now(UTC))
    assert mem.is_revoked("a") is True
