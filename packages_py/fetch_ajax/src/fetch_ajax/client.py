"""
Ajax: the request orchestration entry point.

caller config -> merge (defaults + request interceptors)
              -> fingerprint cache (memory / store tiers)
              -> [miss] transport adapter raced against the timeout
              -> response interceptors -> caller
"""
import asyncio
import inspect
import logging
from typing import Any, Mapping, Optional, Union

from .abort import AbortController, CancellationRegistry
from .cache.fingerprint import fingerprint_config
from .cache.fingerprint_cache import FingerprintCache
from .config import AjaxSettings, merge_config, to_config
from .core.adapter import TransportAdapter
from .core.timeout import consume_outcome, race_timeout
from .core.transport import HttpxTransport
from .errors import FetchError, FetchStoppedError, is_abort_error
from .interceptors import AjaxInterceptors, run_request_chain, run_response_chain
from .types import AbortResult, AjaxConfig, AjaxResult, ErrorHandler, Logger, Transport

logger = logging.getLogger("fetch_ajax.client")

ConfigLike = Union[AjaxConfig, Mapping[str, Any], None]


class Ajax:
    """
    Request orchestrator over a fetch-like transport.

    Example:
        async with Ajax() as ajax:
            ajax.interceptors.request.use(add_auth_header)
            users = await ajax.get("https://api.example.com/users", {"page": 1})
    """

    def __init__(
        self,
        transport: Optional[Transport] = None,
        *,
        settings: Optional[AjaxSettings] = None,
        log: Optional[Logger] = None,
        error_handler: Optional[ErrorHandler] = None,
        cache: Optional[FingerprintCache] = None,
        registry: Optional[CancellationRegistry] = None,
    ) -> None:
        self._logger = log or logger
        self._settings = settings or AjaxSettings()
        self._transport = transport or HttpxTransport()
        self._adapter = TransportAdapter(self._transport, self._logger)
        self._cache = cache or FingerprintCache(log=self._logger)
        self._registry = registry or CancellationRegistry()
        self._error_handler = error_handler
        self.interceptors = AjaxInterceptors()

    @property
    def settings(self) -> AjaxSettings:
        return self._settings

    @property
    def cache(self) -> FingerprintCache:
        return self._cache

    @property
    def registry(self) -> CancellationRegistry:
        return self._registry

    # === Stop switch ===

    def stop(self) -> None:
        """Reject every new call that does not set is_out_stop."""
        self._settings.stop()

    def resume(self) -> None:
        self._settings.resume()

    def is_stopped(self) -> bool:
        return self._settings.stopped

    # === Pipeline ===

    def merge_config(self, config: ConfigLike = None, **options: Any) -> AjaxConfig:
        """Apply defaults and run the request interceptors."""
        merged = merge_config(self._settings.defaults, to_config(config, **options))
        merged = run_request_chain(self.interceptors.request, merged, self._logger)
        if not merged.url:
            raise ValueError("url is required")
        return merged

    def _new_result(self, config: AjaxConfig) -> AjaxResult:
        if config.signal is not None:
            return AjaxResult(config=config, signal=config.signal)
        controller = AbortController()
        request_id = self._registry.register(controller, out_stop=bool(config.is_out_stop))
        return AjaxResult(
            config=config,
            controller=controller,
            signal=controller.signal,
            id=request_id,
        )

    async def _settle(self, result: AjaxResult) -> Any:
        config = result.config
        try:
            return await race_timeout(
                self._adapter.request(config, result.signal),
                config.timeout,
                controller=result.controller,
                message=config.timeout_error_message,
                status=config.timeout_error_status,
            )
        except FetchError as error:
            if self._error_handler is not None and not config.is_no_alert and not is_abort_error(error):
                self._error_handler(error, config)
            raise

    async def _core(self, result: AjaxResult) -> Any:
        handlers = self.interceptors.response.handlers()
        return await run_response_chain(handlers, self._settle(result))

    def _stopped_result(self, config: AjaxConfig) -> AjaxResult:
        future: "asyncio.Future[Any]" = asyncio.get_running_loop().create_future()
        future.set_exception(FetchStoppedError(self._settings.stopped_error_message))
        return AjaxResult(config=config, promise=future)

    def all_ajax(self, config: ConfigLike = None, **options: Any) -> AjaxResult:
        """Start (or join) the call for config. Runs without suspending."""
        partial = to_config(config, **options)
        if not partial.is_out_stop and self._settings.stopped:
            result = self._stopped_result(partial)
        else:
            merged = self.merge_config(partial)
            result = self._cache.dedupe(merged, self._new_result, self._core)
            self._registry.release_on_settle(result.id, result.promise)
        # a caller may abort through the handle and never await the promise
        result.promise.add_done_callback(consume_outcome)
        return result

    # === Public API ===

    async def ajax(self, config: ConfigLike = None, **options: Any) -> Any:
        """Perform a request and return the processed result."""
        result = self.all_ajax(config, **options)
        # shield: one caller giving up must not cancel a shared call
        return await asyncio.shield(result.promise)

    request = ajax

    def ajax_abort_result(self, config: ConfigLike = None, **options: Any) -> AbortResult:
        """Start a request and return it with its abort handle."""
        result = self.all_ajax(config, **options)
        return AbortResult(promise=result.promise, id=result.id, controller=result.controller)

    async def get(self, url: str, data: Any = None, **options: Any) -> Any:
        return await self.ajax(url=url, method="GET", data=data, **options)

    async def post(self, url: str, data: Any = None, **options: Any) -> Any:
        return await self.ajax(url=url, method="POST", data=data, **options)

    async def put(self, url: str, data: Any = None, **options: Any) -> Any:
        return await self.ajax(url=url, method="PUT", data=data, **options)

    async def patch(self, url: str, data: Any = None, **options: Any) -> Any:
        return await self.ajax(url=url, method="PATCH", data=data, **options)

    async def delete(self, url: str, data: Any = None, **options: Any) -> Any:
        return await self.ajax(url=url, method="DELETE", data=data, **options)

    def get_abort_result(self, url: str, data: Any = None, **options: Any) -> AbortResult:
        return self.ajax_abort_result(url=url, method="GET", data=data, **options)

    def post_abort_result(self, url: str, data: Any = None, **options: Any) -> AbortResult:
        return self.ajax_abort_result(url=url, method="POST", data=data, **options)

    def put_abort_result(self, url: str, data: Any = None, **options: Any) -> AbortResult:
        return self.ajax_abort_result(url=url, method="PUT", data=data, **options)

    def patch_abort_result(self, url: str, data: Any = None, **options: Any) -> AbortResult:
        return self.ajax_abort_result(url=url, method="PATCH", data=data, **options)

    def delete_abort_result(self, url: str, data: Any = None, **options: Any) -> AbortResult:
        return self.ajax_abort_result(url=url, method="DELETE", data=data, **options)

    # === Cancellation ===

    def abort(self, request_id: str, reason: Optional[str] = None) -> bool:
        """Abort one in-flight request. Returns False if it is unknown or settled."""
        return self._registry.abort(request_id, reason)

    def abort_all(self, reason: Optional[str] = None) -> int:
        """Abort every in-flight request not flagged is_out_stop."""
        return self._registry.abort_all(reason)

    @staticmethod
    def is_abort_error(error: BaseException) -> bool:
        return is_abort_error(error)

    # === Cache ===

    async def clear_cache_by_config(self, config: ConfigLike = None, **options: Any) -> None:
        """Drop the memory and store entries a config would hit."""
        merged = self.merge_config(config, **options)
        key = fingerprint_config(merged)
        if merged.cache_store is not None:
            deleted = merged.cache_store.delete(key)
            if inspect.isawaitable(deleted):
                await deleted
        self._cache.clear_by_key(key)

    # === Lifecycle ===

    async def close(self) -> None:
        """Close the transport."""
        self._cache.clear()
        await self._transport.aclose()

    async def __aenter__(self) -> "Ajax":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
