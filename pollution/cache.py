"""
pollution/cache.py

Small in-process TTL cache used for standards lookups.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Generic, Hashable, TypeVar

V = TypeVar("V")

Clock = Callable[[], float]


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    key: Hashable
    value: V
    stored_at: float
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class TTLCache(Generic[V]):
    """
    Dictionary-backed cache whose entries expire after ``ttl_seconds``.

    The clock is injectable so expiry can be driven deterministically.
    """

    def __init__(self, ttl_seconds: float, *, clock: Clock = time.monotonic) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive.")
        self._ttl_seconds = float(ttl_seconds)
        self._clock = clock
        self._entries: dict[Hashable, CacheEntry[V]] = {}

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_seconds

    def get(self, key: Hashable) -> V | None:
        entry = self.get_entry(key)
        return entry.value if entry is not None else None

    def get_entry(self, key: Hashable) -> CacheEntry[V] | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            self._entries.pop(key, None)
            return None
        return entry

    def set(self, key: Hashable, value: V) -> CacheEntry[V]:
        now = self._clock()
        entry = CacheEntry(key=key, value=value, stored_at=now, expires_at=now + self._ttl_seconds)
        self._entries[key] = entry
        return entry

    def get_or_load(self, key: Hashable, loader: Callable[[], V]) -> V:
        entry = self.get_entry(key)
        if entry is not None:
            return entry.value
        return self.set(key, loader()).value

    def invalidate(self, key: Hashable) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
