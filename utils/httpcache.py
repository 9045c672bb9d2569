"""
Response cache keyed by request URL.

Entries expire after a fixed TTL. Expired entries are pruned on every write
and the oldest entries are dropped once max_entries is exceeded.
"""
import time
from typing import Any, Dict, Optional, Tuple

from config import HTTP_CACHE_MAX_ENTRIES, HTTP_CACHE_TTL

_MISSING = object()


class HttpCache:
    """In-process TTL cache for processed HTTP responses"""

    def __init__(self, ttl: int = HTTP_CACHE_TTL, max_entries: int = HTTP_CACHE_MAX_ENTRIES):
        self.ttl = ttl
        self.max_entries = max_entries
        self._entries: Dict[str, Tuple[float, Any]] = {}

    def _is_expired(self, stored_at: float, now: float) -> bool:
        return bool(self.ttl) and now - stored_at > self.ttl

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, value = entry
        if self._is_expired(stored_at, time.monotonic()):
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: Any) -> Any:
        now = time.monotonic()
        expired = [k for k, (stored_at, _) in self._entries.items() if self._is_expired(stored_at, now)]
        for k in expired:
            del self._entries[k]

        # Reinsert so dict order stays oldest-first
        self._entries.pop(key, None)
        self._entries[key] = (now, value)

        while self.max_entries and len(self._entries) > self.max_entries:
            del self._entries[next(iter(self._entries))]
        return value

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


http_cache = HttpCache()


def cache(key: str, value: Any = _MISSING) -> Optional[Any]:
    """Get the value stored under key, or store value and return it"""
    if value is _MISSING:
        return http_cache.get(key)
    return http_cache.set(key, value)
