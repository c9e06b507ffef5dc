"""
Types for the fingerprint cache.
"""
from abc import ABC, abstractmethod
from typing import Any, Optional


class CacheStore(ABC):
    """
    Persistent cache tier.

    The orchestration layer only reads and writes through this interface.
    Implementations may be async (preferred) or return plain values.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Get a cached value, or None on a miss."""
        pass

    @abstractmethod
    async def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None:
        """Store a value. ttl_seconds of None means no expiry."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete a cached value."""
        pass

    @abstractmethod
    async def has(self, key: str) -> bool:
        """Check if a key exists."""
        pass

    @abstractmethod
    async def size(self) -> int:
        """Get current size of store."""
        pass

    @abstractmethod
    async def clear(self) -> None:
        """Clear all cached values."""
        pass

    async def close(self) -> None:
        """Close the store and release resources."""
        pass
