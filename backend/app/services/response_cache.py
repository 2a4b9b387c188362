from __future__ import annotations

from collections.abc import Callable
from copy import deepcopy
from dataclasses import dataclass
from threading import Lock
from time import time
from typing import Any


@dataclass(frozen=True)
class _CacheEntry:
    stored_at: float
    payload: dict[str, Any]


class ResponseCache:
    """URL-keyed upstream response cache with a fixed freshness window."""

    def __init__(
        self,
        *,
        ttl_seconds: int,
        max_entries: int = 512,
        clock: Callable[[], float] = time,
    ) -> None:
        self._ttl_seconds = max(0, ttl_seconds)
        self._max_entries = max(1, max_entries)
        self._clock = clock
        self._lock = Lock()
        self._entries: dict[str, _CacheEntry] = {}

    @property
    def ttl_seconds(self) -> int:
        return self._ttl_seconds

    def get(self, key: str) -> dict[str, Any] | None:
        if self._ttl_seconds == 0:
            return None
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if now - entry.stored_at >= self._ttl_seconds:
                del self._entries[key]
                return None
            return deepcopy(entry.payload)

    def put(self, key: str, payload: dict[str, Any]) -> None:
        if self._ttl_seconds == 0:
            return
        now = self._clock()
        with self._lock:
            self._evict_expired(now)
            if key not in self._entries and len(self._entries) >= self._max_entries:
                oldest_key = min(self._entries, key=lambda item: self._entries[item].stored_at)
                del self._entries[oldest_key]
            self._entries[key] = _CacheEntry(stored_at=now, payload=deepcopy(payload))

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _evict_expired(self, now: float) -> None:
        cutoff = now - self._ttl_seconds
        expired = [key for key, entry in self._entries.items() if entry.stored_at <= cutoff]
        for key in expired:
            del self._entries[key]
