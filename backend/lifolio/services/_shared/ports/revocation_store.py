from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol


class RevocationStore(Protocol):
    """
    Key/value store with per-key time-to-live backing logout revocation.

    Contract
    --------
    - ``get`` observes a completed ``put`` immediately (read-your-own-write).
    - An entry is absent once its TTL elapsed. Bounded over-retention is
      acceptable, early eviction is not.
    - A non-positive TTL means the entry is absent right away.
    - Transport failures raise
      :class:`~lifolio.services._shared.errors.RevocationStoreError`.
    """

    def get(self, key: str) -> str | None: ...
    def put(self, key: str, value: str, ttl: timedelta) -> None: ...
    def delete(self, key: str) -> None: ...


@dataclass(frozen=True, slots=True)
class _Entry:
    value: str
    expires_at: datetime


class InMemoryRevocationStore(RevocationStore):
    """
    In-memory TTL store for unit tests and single-process development.

    .. note::
       Expiry is evaluated against ``clock`` so tests can move time forward
       without sleeping. Uses a threading lock to keep per-key writes atomic.
    """

    def __init__(self, *, clock: Callable[[], datetime] | None = None) -> None:
        self._entries: dict[str, _Entry] = {}
        self._clock = clock or (lambda: datetime.now(UTC))
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.expires_at <= self._clock():
                del self._entries[key]
                return None
            return entry.value

    def put(self, key: str, value: str, ttl: timedelta) -> None:
        with self._lock:
            now = self._clock()
            self._cleanup(now)
            if ttl <= timedelta(0):
                self._entries.pop(key, None)
                return
            self._entries[key] = _Entry(value=value, expires_at=now + ttl)

    def _cleanup(self, now: datetime) -> None:
        """Drop expired entries; caller holds the lock."""
        expired = [k for k, e in self._entries.items() if e.expires_at <= now]
        for k in expired:
            del self._entries[k]

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def ttl(self, key: str) -> timedelta | None:
        """Return the remaining lifetime of ``key`` (test helper)."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            remaining = entry.expires_at - self._clock()
            return remaining if remaining > timedelta(0) else None

    def __len__(self) -> int:
        now = self._clock()
        with self._lock:
            return sum(1 for e in self._entries.values() if e.expires_at > now)
