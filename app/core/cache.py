"""Lightweight in-memory TTL cache for API responses.

Entries expire lazily: an expired entry is dropped the next time it is read,
never by a background sweep. There is no capacity bound and no locking, so
callers sharing one store must scope their keys (see ``make_cache_key``) if
data must not leak between tenants.

One ``ResponseCache`` is built per process (``default_cache``) and passed by
reference to consumers; tests construct their own.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlencode


class CacheTTL:
    """TTLs in seconds for the logical data categories."""

    DASHBOARD = 30.0
    INVOICES = 60.0
    CUSTOMERS = 120.0


@dataclass
class CacheEntry:
    key: str
    payload: Any
    inserted_at: float
    ttl: float

    def is_valid(self, now: float) -> bool:
        return now - self.inserted_at <= self.ttl


class ResponseCache:
    """Key -> (payload, inserted_at, ttl) map with lazy expiry on read."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def get(self, key: str, default: Any = None) -> Any:
        """Return the cached payload if present and not expired, else ``default``."""
        entry = self._entries.get(key)
        if entry is None:
            return default
        if not entry.is_valid(self._clock()):
            self._entries.pop(key, None)
            return default
        return entry.payload

    def set(self, key: str, payload: Any, ttl: float) -> None:
        """Insert or overwrite ``key``, stamped with the current time."""
        self._entries[key] = CacheEntry(
            key=key, payload=payload, inserted_at=self._clock(), ttl=ttl
        )

    def clear(self, key: str | None = None) -> None:
        """Remove one entry, or every entry when ``key`` is omitted."""
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)

    def peek(self, key: str) -> CacheEntry | None:
        """Raw entry lookup. Does not expire anything."""
        return self._entries.get(key)

    def keys(self) -> list[str]:
        return list(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))


def make_cache_key(*parts: object, params: Mapping[str, Any] | None = None) -> str:
    """Build a string key like ``invoices:<tenant>?limit=10&page=1``.

    Query params are sorted so equivalent requests share one entry; ``None``
    values are dropped.
    """
    key = ":".join(str(p) for p in parts)
    if params:
        query = urlencode(sorted((k, v) for k, v in params.items() if v is not None))
        if query:
            key = f"{key}?{query}"
    return key


default_cache = ResponseCache()


def get_cached_data(key: str) -> Any | None:
    """Return cached value from the process store, or None."""
    return default_cache.get(key)


def set_cached_data(key: str, data: Any, ttl: float) -> None:
    """Store a value in the process store."""
    default_cache.set(key, data, ttl)


def clear_cache(key: str | None = None) -> None:
    """Clear one key (or everything) from the process store."""
    default_cache.clear(key)
