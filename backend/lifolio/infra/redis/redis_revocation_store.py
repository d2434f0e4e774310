import math
from datetime import timedelta

import redis  # type: ignore[import-untyped]
from redis.exceptions import RedisError  # type: ignore[import-untyped]

from lifolio.services._shared.errors import RevocationStoreError


class RedisRevocationStore:
    """
    TTL key/value store for logout revocation backed by Redis.

    TTLs are written in milliseconds and rounded up, so an entry may outlive
    its token by under a millisecond but never disappears early.
    """

    def __init__(self, r: redis.Redis, *, prefix: str = ""):
        self.r = r
        self.prefix = prefix

    def _k(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def get(self, key: str) -> str | None:
        try:
            value = self.r.get(self._k(key))
        except RedisError as exc:
            raise RevocationStoreError(f"GET failed: {exc}") from exc
        if value is None:
            return None
        if not isinstance(value, bytes):
            return str(value)
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise RevocationStoreError(f"GET returned undecodable value: {exc}") from exc

    def put(self, key: str, value: str, ttl: timedelta) -> None:
        ttl_ms = math.ceil(ttl.total_seconds() * 1000)
        try:
            if ttl_ms <= 0:
                # already dead: make sure no stale entry survives
                self.r.delete(self._k(key))
                return
            self.r.set(self._k(key), value, px=ttl_ms)
        except RedisError as exc:
            raise RevocationStoreError(f"SET failed: {exc}") from exc

    def delete(self, key: str) -> None:
        try:
            self.r.delete(self._k(key))
        except RedisError as exc:
            raise RevocationStoreError(f"DEL failed: {exc}") from exc

    def ping(self) -> bool:
        """Return ``True`` if Redis answers, ``False`` otherwise."""
        try:
            return bool(self.r.ping())
        except RedisError:
            return False
