"""
Redis cache store implementation
Suitable for sharing cached responses across processes
"""
import json
from typing import Any, AsyncIterator, Optional, Protocol

from ..types import CacheStore


class RedisClientProtocol(Protocol):
    """Protocol for Redis client (compatible with redis-py async)"""

    async def get(self, name: str) -> Any:
        ...

    async def set(self, name: str, value: Any, ex: Optional[int] = None) -> Any:
        ...

    async def delete(self, *names: str) -> int:
        ...

    async def exists(self, *names: str) -> int:
        ...

    def scan_iter(self, match: Optional[str] = None) -> AsyncIterator[Any]:
        ...

    async def aclose(self) -> None:
        ...


class RedisCacheStore(CacheStore):
    """
    Redis implementation of CacheStore.
    Values are stored as JSON, so only JSON-serializable results can be cached.
    """

    def __init__(self, client: RedisClientProtocol, key_prefix: str = "fetch_ajax:") -> None:
        """
        Create a new RedisCacheStore.

        Args:
            client: Redis client (async redis-py instance)
            key_prefix: Prefix for all keys. Default: 'fetch_ajax:'
        """
        self._client = client
        self._key_prefix = key_prefix

    def _get_key(self, key: str) -> str:
        """Get the full key with prefix"""
        return f"{self._key_prefix}{key}"

    async def get(self, key: str) -> Optional[Any]:
        raw = await self._client.get(self._get_key(key))
        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        return json.loads(raw)

    async def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None:
        # Redis EX is whole seconds; round sub-second TTLs up
        ex = max(1, int(round(ttl_seconds))) if ttl_seconds is not None and ttl_seconds > 0 else None
        await self._client.set(self._get_key(key), json.dumps(value), ex=ex)

    async def delete(self, key: str) -> bool:
        return bool(await self._client.delete(self._get_key(key)))

    async def has(self, key: str) -> bool:
        return bool(await self._client.exists(self._get_key(key)))

    async def _keys(self) -> list:
        return [key async for key in self._client.scan_iter(match=f"{self._key_prefix}*")]

    async def size(self) -> int:
        return len(await self._keys())

    async def clear(self) -> None:
        keys = await self._keys()
        if keys:
            await self._client.delete(*keys)

    async def close(self) -> None:
        """Close the store and cleanup resources"""
        await self._client.aclose()


def create_redis_cache_store(
    client: RedisClientProtocol, key_prefix: str = "fetch_ajax:"
) -> RedisCacheStore:
    """
    Create a new RedisCacheStore instance.

    Args:
        client: Redis client (async redis-py instance)
        key_prefix: Prefix for all keys

    Returns:
        RedisCacheStore instance
    """
    return RedisCacheStore(client, key_prefix)
