"""
Fingerprint-keyed de-duplication and caching.
"""
from .fingerprint import fingerprint_config, generate_fingerprint
from .fingerprint_cache import FingerprintCache, store_ttl
from .types import CacheStore
from .stores import (
    MemoryCacheStore,
    MemoryInFlightStore,
    RedisCacheStore,
    RedisClientProtocol,
    create_memory_cache_store,
    create_redis_cache_store,
)

__all__ = [
    "fingerprint_config",
    "generate_fingerprint",
    "FingerprintCache",
    "store_ttl",
    "CacheStore",
    "MemoryCacheStore",
    "MemoryInFlightStore",
    "RedisCacheStore",
    "RedisClientProtocol",
    "create_memory_cache_store",
    "create_redis_cache_store",
]
