"""
Memory store implementations for the fingerprint cache.
"""
import asyncio
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

from ..types import CacheStore

T = TypeVar("T")


@dataclass
class _Slot(Generic[T]):
    value: T
    inserted_at: float
    expires_at: Optional[float] = None

    def expired(self, now: float) -> bool:
        return self.expires_at is not None and self.expires_at <= now


class MemoryCacheStore(CacheStore):
    """
    In-memory persistent tier with per-key TTL.
    """

    def __init__(
        self,
        cleanup_interval_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._cache: Dict[str, _Slot[Any]] = {}
        self._clock = clock
        self._cleanup_interval = cleanup_interval_seconds
        self._cleanup_task: Optional[asyncio.Task] = None
        self._closed = False

    def _start_cleanup(self) -> None:
        """Start the background cleanup task."""
        if self._cleanup_task is None and not self._closed:
            self._cleanup_task = asyncio.get_running_loop().create_task(self._cleanup_loop())

    async def _cleanup_loop(self) -> None:
        """Background cleanup loop."""
        while not self._closed:
            try:
                await asyncio.sleep(self._cleanup_interval)
                self._cleanup()
            except asyncio.CancelledError:
                break

    def _cleanup(self) -> None:
        """Remove expired entries."""
        now = self._clock()
        expired_keys = [key for key, slot in self._cache.items() if slot.expired(now)]
        for key in expired_keys:
            del self._cache[key]

    def _live(self, key: str) -> Optional[_Slot[Any]]:
        slot = self._cache.get(key)
        if slot is None:
            return None
        if slot.expired(self._clock()):
            del self._cache[key]
            return None
        return slot

    async def get(self, key: str) -> Optional[Any]:
        slot = self._live(key)
        return slot.value if slot is not None else None

    async def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None:
        now = self._clock()
        expires_at = now + ttl_seconds if ttl_seconds is not None else None
        self._cache[key] = _Slot(value, now, expires_at)
        self._start_cleanup()

    async def has(self, key: str) -> bool:
        return self._live(key) is not None

    async def delete(self, key: str) -> bool:
        if key in self._cache:
            del self._cache[key]
            return True
        return False

    async def clear(self) -> None:
        self._cache.clear()

    async def size(self) -> int:
        self._cleanup()
        return len(self._cache)

    async def close(self) -> None:
        self._closed = True
        if self._cleanup_task is not None:
            self._cleanup_task.cancel()
            try:
                await self._cleanup_task
            except asyncio.CancelledError:
                pass
            self._cleanup_task = None
        self._cache.clear()


class MemoryInFlightStore(Generic[T]):
    """
    Fingerprint-keyed map for the memory tier.

    Entries carry an optional expiry and are evicted lazily, so no timers are
    left behind once a request settles. A read evicts its own key; set()
    sweeps every expired slot once the earliest known expiry has passed.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._entries: Dict[str, _Slot[T]] = {}
        self._clock = clock
        self._next_expiry: Optional[float] = None

    def _sweep(self, now: float) -> None:
        if self._next_expiry is not None and self._next_expiry <= now:
            self.prune()

    def get(self, key: str) -> Optional[T]:
        slot = self._entries.get(key)
        if slot is None:
            return None
        if slot.expired(self._clock()):
            del self._entries[key]
            return None
        return slot.value

    def set(self, key: str, value: T) -> None:
        now = self._clock()
        self._sweep(now)
        self._entries[key] = _Slot(value, now)

    def expire(self, key: str, value: T, ttl_seconds: float) -> bool:
        """Give key a lifetime of ttl_seconds, if it still maps to value."""
        slot = self._entries.get(key)
        if slot is None or slot.value is not value:
            return False
        slot.expires_at = self._clock() + ttl_seconds
        if self._next_expiry is None or slot.expires_at < self._next_expiry:
            self._next_expiry = slot.expires_at
        return True

    def discard(self, key: str, value: Optional[T] = None) -> bool:
        """Remove key. When value is given, only if key still maps to it."""
        slot = self._entries.get(key)
        if slot is None or (value is not None and slot.value is not value):
            return False
        del self._entries[key]
        return True

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def prune(self) -> int:
        now = self._clock()
        expired_keys = [key for key, slot in self._entries.items() if slot.expired(now)]
        for key in expired_keys:
            del self._entries[key]
        pending = [slot.expires_at for slot in self._entries.values() if slot.expires_at is not None]
        self._next_expiry = min(pending) if pending else None
        return len(expired_keys)

    def size(self) -> int:
        self.prune()
        return len(self._entries)

    def clear(self) -> None:
        self._entries.clear()
        self._next_expiry = None


def create_memory_cache_store(cleanup_interval_seconds: float = 60.0) -> MemoryCacheStore:
    """Create a memory cache store."""
    return MemoryCacheStore(cleanup_interval_seconds)
