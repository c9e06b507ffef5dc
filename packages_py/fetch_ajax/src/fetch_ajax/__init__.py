"""
HTTP request orchestration over a fetch-like transport.

Adds request/response interceptors, per-fingerprint de-duplication with an
optional persistent cache tier, timeout-bounded cancellation and a uniform
error taxonomy.
"""
from .abort import AbortController, AbortSignal, CancellationRegistry
from .types import (
    AjaxConfig,
    AjaxResult,
    AbortResult,
    HttpMethod,
    Logger,
    Transport,
    TransportResponse,
)
from .config import (
    DEFAULT_AJAX_CONFIG,
    DEFAULT_INJECT_HEADER_KEYS,
    AjaxSettings,
    load_defaults_from_env,
    merge_config,
)
from .errors import (
    FetchError,
    FetchTimeoutError,
    FetchAbortError,
    FetchStoppedError,
    is_abort_error,
)
from .interceptors import AjaxInterceptors, Interceptors
from .cache import (
    CacheStore,
    FingerprintCache,
    MemoryCacheStore,
    MemoryInFlightStore,
    RedisCacheStore,
    create_memory_cache_store,
    create_redis_cache_store,
    generate_fingerprint,
)
from .core import HttpxResponse, HttpxTransport, TransportAdapter, race_timeout
from .client import Ajax
from .factory import create_ajax, create_httpx_transport

__all__ = [
    # Cancellation
    "AbortController",
    "AbortSignal",
    "CancellationRegistry",
    # Types
    "AjaxConfig",
    "AjaxResult",
    "AbortResult",
    "HttpMethod",
    "Logger",
    "Transport",
    "TransportResponse",
    # Config
    "DEFAULT_AJAX_CONFIG",
    "DEFAULT_INJECT_HEADER_KEYS",
    "AjaxSettings",
    "load_defaults_from_env",
    "merge_config",
    # Errors
    "FetchError",
    "FetchTimeoutError",
    "FetchAbortError",
    "FetchStoppedError",
    "is_abort_error",
    # Interceptors
    "AjaxInterceptors",
    "Interceptors",
    # Cache
    "CacheStore",
    "FingerprintCache",
    "MemoryCacheStore",
    "MemoryInFlightStore",
    "RedisCacheStore",
    "create_memory_cache_store",
    "create_redis_cache_store",
    "generate_fingerprint",
    # Core
    "HttpxResponse",
    "HttpxTransport",
    "TransportAdapter",
    "race_timeout",
    # Client
    "Ajax",
    "create_ajax",
    "create_httpx_transport",
]

__version__ = "1.0.0"
