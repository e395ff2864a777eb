"""In-process TTL cache.

Used for per-user subscription statuses and computed entitlements. Entries
expire after ``ttl`` seconds and can be invalidated explicitly whenever the
underlying rows change.
"""

import asyncio
import time
from typing import Dict, Generic, Optional, Tuple, TypeVar

V = TypeVar("V")


class TTLCache(Generic[V]):
    """Async-safe key/value cache with per-entry expiry.

    Attributes:
        ttl: Time-to-live for entries in seconds
        max_size: Maximum number of live entries (0 = unlimited)
    """

    def __init__(self, ttl: float, max_size: int = 0) -> None:
        self._entries: Dict[str, Tuple[float, V]] = {}
        self.ttl = ttl
        self.max_size = max_size
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Optional[V]:
        """Return the cached value, or None when missing or expired."""
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if time.monotonic() - stored_at >= self.ttl:
                del self._entries[key]
                return None
            return value

    def _purge_expired(self, now: float) -> None:
        expired = [key for key, (stored_at, _) in self._entries.items() if now - stored_at >= self.ttl]
        for key in expired:
            del self._entries[key]

    async def set(self, key: str, value: V) -> None:
        """Store a value, dropping expired entries and the oldest one when full."""
        async with self._lock:
            now = time.monotonic()
            self._purge_expired(now)
            if self.max_size > 0 and key not in self._entries and len(self._entries) >= self.max_size:
                # Evict oldest entry (FIFO)
                oldest_key = next(iter(self._entries))
                del self._entries[oldest_key]
            self._entries[key] = (now, value)

    async def invalidate(self, key: str) -> None:
        async with self._lock:
            self._entries.pop(key, None)

    async def clear(self) -> None:
        async with self._lock:
            self._entries.clear()

    def size(self) -> int:
        """Get the current number of entries, expired ones included."""
        return len(self._entries)
