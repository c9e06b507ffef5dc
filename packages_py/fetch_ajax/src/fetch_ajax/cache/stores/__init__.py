"""
Store implementations for the fingerprint cache.
"""
from .memory import (
    MemoryCacheStore,
    MemoryInFlightStore,
    create_memory_cache_store,
)
from .redis import (
    RedisCacheStore,
    RedisClientProtocol,
    create_redis_cache_store,
)

__all__ = [
    "MemoryCacheStore",
    "MemoryInFlightStore",
    "create_memory_cache_store",
    "RedisCacheStore",
    "RedisClientProtocol",
    "create_redis_cache_store",
]
