"""
In-memory token cache
"""

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from .base import TokenCache


@dataclass
class CacheEntry:
    """Cached token with its absolute expiry on the cache clock"""
    token: str
    expires_at: float

    def is_valid(self, now: float) -> bool:
        """Check whether the entry may still be returned"""
        return bool(self.token) and now < self.expires_at


class InMemoryTokenCache(TokenCache):
    """
    Thread-safe token cache with TTL support

    Expired entries are not purged on read; they are simply treated as a miss
    and overwritten by the next refresh. Call :meth:`purge_expired` to drop
    them explicitly.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self._clock = clock or time.monotonic
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    async def get(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or not entry.is_valid(self._clock()):
                return None
            return entry.token

    async def set(self, key: str, token: str, ttl_seconds: int) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(token=token, expires_at=self._clock() + ttl_seconds)

    def invalidate(self, key: str) -> bool:
        """Remove the entry for ``key``; returns True if one was present"""
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        """Clear all cached entries"""
        with self._lock:
            self._entries.clear()

    def purge_expired(self) -> int:
        """Remove expired entries and return count removed"""
        with self._lock:
            now = self._clock()
            expired_keys = [key for key, entry in self._entries.items() if not entry.is_valid(now)]
            for key in expired_keys:
                del self._entries[key]
            return len(expired_keys)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


_shared_cache: Optional[InMemoryTokenCache] = None
_shared_cache_lock = threading.Lock()


def shared_token_cache() -> InMemoryTokenCache:
    """
    Get the process-wide default token cache.

    Client instances sharing an identity reuse each other's tokens through it.
    Only the client factories fall back to this instance; token managers always
    receive their cache explicitly.

    Returns:
        InMemoryTokenCache: Lazily created shared instance
    """
    global _shared_cache
    with _shared_cache_lock:
        if _shared_cache is None:
            _shared_cache = InMemoryTokenCache()
        return _shared_cache


def reset_shared_token_cache(cache: Optional[InMemoryTokenCache] = None) -> InMemoryTokenCache:
    """Replace the process-wide default cache and return the new instance"""
    global _shared_cache
    with _shared_cache_lock:
        _shared_cache = cache if cache is not None else InMemoryTokenCache()
        return _shared_cache
