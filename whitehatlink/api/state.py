"""In-memory response cache with path and tag invalidation."""

import time
from dataclasses import dataclass, field
from threading import Lock
from typing import Any, Optional


@dataclass
class CacheEntry:
    """Cached value for one (path, key) pair."""

    value: Any
    expires_at: float
    tags: frozenset[str] = field(default_factory=frozenset)

    @property
    def expired(self) -> bool:
        return time.time() >= self.expires_at


class ResponseCache:
    """Thread-safe TTL cache for rendered API responses.

    Entries are addressed by the request path plus a key (e.g. the
    serialized query) and can be dropped by path or by tag through the
    revalidation endpoint.
    """

    def __init__(self, max_entries: int = 512):
        self._entries: dict[tuple[str, str], CacheEntry] = {}
        self._lock = Lock()
        self._max_entries = max_entries

    def get(self, path: str, key: str = "") -> Optional[Any]:
        with self._lock:
            entry = self._entries.get((path, key))
            if entry is None:
                return None
            if entry.expired:
                del self._entries[(path, key)]
                return None
            return entry.value

    def set(self, path: str, key: str, value: Any, ttl: float, tags: tuple[str, ...] = ()) -> None:
        if ttl <= 0:
            return
        with self._lock:
            self._entries[(path, key)] = CacheEntry(
                value=value,
                expires_at=time.time() + ttl,
                tags=frozenset(tags),
            )
            # Evict oldest insertions if over limit
            while len(self._entries) > self._max_entries:
                self._entries.pop(next(iter(self._entries)))

    def invalidate_path(self, path: str) -> int:
        """Drop entries cached under ``path`` or below it; returns how many were removed.

        The root path only matches itself.
        """
        path = path.rstrip("/") or "/"
        nested = f"{path}/" if path != "/" else None
        with self._lock:
            doomed = [
                k for k in self._entries
                if k[0] == path or (nested is not None and k[0].startswith(nested))
            ]
            for k in doomed:
                del self._entries[k]
            return len(doomed)

    def invalidate_tag(self, tag: str) -> int:
        """Drop every entry carrying ``tag``; returns how many were removed."""
        with self._lock:
            doomed = [k for k, entry in self._entries.items() if tag in entry.tags]
            for k in doomed:
                del self._entries[k]
            return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


# Global singleton
response_cache = ResponseCache()
