import asyncio
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Hashable, Optional


@dataclass
class CacheEntry:
    value: Any
    expires_at: float


class TTLCache:
    """In-memory read-through TTL cache.

    Concurrent loads for the same key share one loader call. Loader
    failures are not cached.
    """

    def __init__(self, default_ttl: float = 300, max_size: int = 256):
        self.default_ttl = default_ttl
        self.max_size = max_size
        self._cache: Dict[Hashable, CacheEntry] = {}
        self._key_locks: Dict[Hashable, asyncio.Lock] = {}
        self._lock_users: Dict[Hashable, int] = {}

    @property
    def enabled(self) -> bool:
        return self.default_ttl > 0

    def get(self, key: Hashable) -> Optional[Any]:
        entry = self._cache.get(key)
        if entry is None:
            return None
        if time.monotonic() > entry.expires_at:
            self._cache.pop(key, None)
            return None
        return entry.value

    def set(self, key: Hashable, value: Any, ttl: Optional[float] = None) -> None:
        if not self.enabled:
            return
        ttl = ttl or self.default_ttl
        self._cache[key] = CacheEntry(value=value, expires_at=time.monotonic() + ttl)
        # Evict soonest-expiring entries when over capacity
        while len(self._cache) > self.max_size:
            oldest = min(self._cache, key=lambda k: self._cache[k].expires_at)
            del self._cache[oldest]

    async def get_or_load(self, key: Hashable, loader: Callable[[], Awaitable[Any]]) -> Any:
        if not self.enabled:
            return await loader()

        cached = self.get(key)
        if cached is not None:
            return cached

        lock = self._key_locks.get(key)
        if lock is None:
            lock = self._key_locks[key] = asyncio.Lock()
        self._lock_users[key] = self._lock_users.get(key, 0) + 1
        try:
            async with lock:
                cached = self.get(key)
                if cached is not None:
                    return cached
                value = await loader()
                self.set(key, value)
                return value
        finally:
            # A key's lock lives only while some caller is using it.
            remaining = self._lock_users.pop(key) - 1
            if remaining:
                self._lock_users[key] = remaining
            else:
                self._key_locks.pop(key, None)

    @property
    def lock_count(self) -> int:
        return len(self._key_locks)

    def clear(self) -> None:
        self._cache.clear()
        self._key_locks.clear()
        self._lock_users.clear()

    def size(self) -> int:
        return len(self._cache)
