"""
Factory functions for fetch_ajax.
"""
from typing import Any, Optional

import httpx

from .abort import CancellationRegistry
from .cache.fingerprint_cache import FingerprintCache
from .cache.stores.memory import MemoryInFlightStore
from .client import Ajax
from .config import AjaxSettings
from .core.transport import HttpxTransport
from .types import ErrorHandler, Logger, Transport


def create_httpx_transport(
    httpx_client: Optional[httpx.AsyncClient] = None,
    **client_kwargs: Any,
) -> HttpxTransport:
    """
    Create the default transport.

    Pass an existing httpx.AsyncClient to share its pool (it is not closed by
    the transport), or keyword arguments for a new one.
    """
    if httpx_client is None and client_kwargs:
        client_kwargs.setdefault("timeout", None)
        return HttpxTransport(httpx.AsyncClient(**client_kwargs), close_client=True)
    return HttpxTransport(httpx_client)


def create_ajax(
    transport: Optional[Transport] = None,
    *,
    settings: Optional[AjaxSettings] = None,
    log: Optional[Logger] = None,
    error_handler: Optional[ErrorHandler] = None,
    in_flight_store: Optional[MemoryInFlightStore] = None,
    from_env: bool = False,
) -> Ajax:
    """
    Create an Ajax instance.

    Args:
        transport: Network transport. Default: HttpxTransport
        settings: Shared process-wide settings. Default: a new AjaxSettings
        log: Logger capability. Default: logging.getLogger("fetch_ajax.client")
        error_handler: Called with (error, config) for non-abort failures
        in_flight_store: Memory tier map, e.g. one with an injected clock
        from_env: Build settings from FETCH_AJAX_* variables when settings is None
    """
    if settings is None and from_env:
        settings = AjaxSettings.from_env()
    cache = FingerprintCache(in_flight_store, log=log) if in_flight_store is not None else None
    return Ajax(
        transport,
        settings=settings,
        log=log,
        error_handler=error_handler,
        cache=cache,
        registry=CancellationRegistry(),
    )
