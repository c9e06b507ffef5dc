"""
Fingerprint cache: at most one live transport call per fingerprint, with an
optional persistent store tier.

Two tiers share one key:
- memory tier: the in-flight map. Identical requests issued while one is
  pending join it instead of calling the transport again.
- store tier: an optional CacheStore consulted before the transport and
  written after a successful call.

When a store is configured it owns retention and the memory entry is dropped
as soon as the call settles. Without a store, cache_timeout decides how long a
successful entry stays in memory. Failures are never retained by either tier.
"""
import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Optional

from ..types import AjaxConfig, AjaxResult, Logger
from .fingerprint import fingerprint_config
from .stores.memory import MemoryInFlightStore

logger = logging.getLogger("fetch_ajax.fingerprint_cache")

NewResult = Callable[[AjaxConfig], AjaxResult]
CoreCall = Callable[[AjaxResult], Awaitable[Any]]


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


def store_ttl(cache_timeout: Optional[float]) -> Optional[float]:
    """TTL handed to the store: positive timeouts only, otherwise no expiry."""
    if cache_timeout is not None and cache_timeout > 0:
        return cache_timeout
    return None


class FingerprintCache:
    """
    De-duplicates concurrent identical requests.

    The lookup and the insert happen synchronously in dedupe(), before any
    await, so a second identical call always finds the first one's entry.

    Example:
        cache = FingerprintCache()
        result = cache.dedupe(config, new_result, core)
        value = await result.promise
    """

    def __init__(
        self,
        entries: Optional[MemoryInFlightStore[AjaxResult]] = None,
        log: Optional[Logger] = None,
    ) -> None:
        self._entries: MemoryInFlightStore[AjaxResult] = entries or MemoryInFlightStore()
        self._logger = log or logger

    def dedupe(self, config: AjaxConfig, new_result: NewResult, core: CoreCall) -> AjaxResult:
        """
        Return the shared entry for config, starting a new call if needed.

        new_result builds an entry (with its controller) for a fresh call;
        core performs transport, timeout and response pipeline for it.
        """
        if config.cache_timeout == 0:
            result = new_result(config)
            result.promise = asyncio.ensure_future(core(result))
            return result

        key = fingerprint_config(config)
        existing = self._entries.get(key)
        if existing is not None:
            self._logger.debug(f"read from cache : {key}")
            existing.is_from_memory_cache = True
            return existing

        result = new_result(config)
        result.fingerprint = key
        if config.cache_store is not None:
            result.promise = asyncio.ensure_future(self._through_store(key, result, core))
        else:
            result.promise = asyncio.ensure_future(self._through_memory(key, result, core))
        self._entries.set(key, result)
        self._logger.debug(f"lead request : {key}")
        return result

    async def _through_memory(self, key: str, result: AjaxResult, core: CoreCall) -> Any:
        try:
            value = await core(result)
        except BaseException:
            self._entries.discard(key, result)
            raise

        cache_timeout = result.config.cache_timeout
        if cache_timeout is None:
            self._entries.discard(key, result)
        elif cache_timeout >= 0:
            self._entries.expire(key, result, cache_timeout)
        return value

    async def _through_store(self, key: str, result: AjaxResult, core: CoreCall) -> Any:
        store = result.config.cache_store
        try:
            try:
                cached = await _resolve(store.get(key))
            except Exception as error:
                self._logger.error(f"cache get {key} error: {error}")
                cached = None

            if cached is not None:
                self._logger.debug(f"read from cacheStore : {key}")
                result.is_from_store_cache = True
                return cached

            value = await core(result)
            try:
                await _resolve(store.set(key, value, ttl_seconds=store_ttl(result.config.cache_timeout)))
            except Exception as error:
                self._logger.error(f"cache set {key} error: {error}")
            return value
        finally:
            self._entries.discard(key, result)

    def get(self, key: str) -> Optional[AjaxResult]:
        return self._entries.get(key)

    def clear_by_key(self, key: str) -> bool:
        return self._entries.discard(key)

    def size(self) -> int:
        return self._entries.size()

    def clear(self) -> None:
        self._entries.clear()
