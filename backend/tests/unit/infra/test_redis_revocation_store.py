# tests/unit/infra/test_redis_revocation_store.py
"""
Unit tests for RedisRevocationStore using fakeredis.

These tests exercise the main flows:
- put + get (read-your-own-write)
- TTL written in milliseconds, never shorter than requested
- non-positive TTL leaves no entry behind
- delete
- transport failures surfaced as RevocationStoreError
- TokenService end to end on top of Redis
"""

from __future__ import annotations

from datetime import timedelta

import fakeredis
import pytest
from lifolio.infra.redis.redis_revocation_store import RedisRevocationStore
from lifolio.services._shared.errors import RevocationStoreError
from lifolio.services.auth.dto import Accepted, Rejected, RejectionReason
from lifolio.services.auth.service import TokenService


@pytest.fixture
def fake_redis():
    """Provide a fresh FakeRedis instance for each test."""
    r = fakeredis.FakeRedis()
    r.flushall()
    return r


@pytest.fixture
def redis_store(fake_redis):
    """Provide a RedisRevocationStore backed by FakeRedis."""
    return RedisRevocationStore(fake_redis, prefix="lifolio:")


@pytest.fixture
def down_store():
    """Store whose server refuses every command."""
    server = fakeredis.FakeServer()
    server.connected = False
    return RedisRevocationStore(fakeredis.FakeRedis(server=server))


def test_put_then_get(redis_store, fake_redis):
    redis_store.put("tok", "42", timedelta(minutes=5))
    assert redis_store.get("tok") == "42"
    assert fake_redis.get("lifolio:tok") == b"42"


def test_get_missing_returns_none(redis_store):
    assert redis_store.get("nope") is None


def test_ttl_is_rounded_up_to_milliseconds(redis_store, fake_redis):
    redis_store.put("tok", "42", timedelta(seconds=299, microseconds=500))
    pttl = fake_redis.pttl("lifolio:tok")
    assert 0 < pttl <= 299_001


@pytest.mark.parametrize("ttl", [timedelta(0), timedelta(seconds=-30)])
def test_non_positive_ttl_leaves_no_entry(redis_store, fake_redis, ttl):
    fake_redis.set("lifolio:tok", "42")
    redis_store.put("tok", "42", ttl)
    assert redis_store.get("tok") is None
    assert fake_redis.exists("lifolio:tok") == 0


def test_delete(redis_store):
    redis_store.put("7", "refresh-token", timedelta(days=1))
    redis_store.delete("7")
    assert redis_store.get("7") is None
    # deleting an absent key is a no-op
    redis_store.delete("7")


def test_transport_errors_raise_store_error(down_store):
    with pytest.raises(RevocationStoreError):
        down_store.get("tok")
    with pytest.raises(RevocationStoreError):
        down_store.put("tok", "42", timedelta(minutes=1))
    with pytest.raises(RevocationStoreError):
        down_store.delete("tok")
    assert down_store.ping() is False


def test_undecodable_value_raises_store_error(redis_store, fake_redis):
    fake_redis.set("lifolio:tok", b"\xff\xfe")
    with pytest.raises(RevocationStoreError):
        redis_store.get("tok")


def test_ping(redis_store):
    assert redis_store.ping() is True


def _service(codec, token_cfg, store) -> TokenService:
    return TokenService(codec=codec, store=store, token_cfg=token_cfg)


def test_service_logout_writes_entry_bounded_by_token_lifetime(codec, token_cfg, redis_store, fake_redis):
    service = _service(codec, token_cfg, redis_store)
    raw = service.issue_access_token(42)
    service.logout(42, raw)

    assert fake_redis.get(f"lifolio:{raw}") == b"42"
    assert 0 < fake_redis.pttl(f"lifolio:{raw}") <= 3600 * 1000
    assert service.validate(raw) == Rejected(RejectionReason.POSSIBLE_HIJACK, 42)


def test_service_logout_clears_refresh_marker(codec, token_cfg, redis_store, fake_redis):
    service = _service(codec, token_cfg, redis_store)
    pair = service.issue_token_pair(42)
    assert fake_redis.get("lifolio:42") == pair.refresh_token.encode()

    service.logout(42, pair.access_token)
    assert fake_redis.exists("lifolio:42") == 0


def test_service_reports_store_unavailable(codec, token_cfg, down_store):
    service = _service(codec, token_cfg, down_store)
    raw = service.issue_access_token(42)
    result = service.validate(raw)
    assert result == Rejected(RejectionReason.STORE_UNAVAILABLE, 42)
    assert not isinstance(result, Accepted)


def test_service_treats_corrupt_entry_as_store_unavailable(codec, token_cfg, redis_store, fake_redis):
    service = _service(codec, token_cfg, redis_store)
    raw = service.issue_access_token(42)
    fake_redis.set(f"lifolio:{raw}", b"\xff\xfe")
    assert service.validate(raw) == Rejected(RejectionReason.STORE_UNAVAILABLE, 42)
