"""
Request and response interceptor chains.
"""
import inspect
import logging
from typing import Any, Awaitable, Generic, List, Optional, Tuple, TypeVar

from .types import AjaxConfig, ErrorCallback, Logger, RequestCallback, ResponseCallback

logger = logging.getLogger("fetch_ajax.interceptors")

C = TypeVar("C")

Handlers = Tuple[Optional[C], Optional[ErrorCallback]]


class Interceptors(Generic[C]):
    """
    Ordered (fulfilled, rejected) handler pairs.

    Indices returned by use() stay valid after eject(): ejected slots are
    left empty rather than removed.
    """

    def __init__(self) -> None:
        self._chain: List[Optional[Handlers]] = []

    def use(self, fulfilled: Optional[C], rejected: Optional[ErrorCallback] = None) -> int:
        self._chain.append((fulfilled, rejected))
        return len(self._chain) - 1

    def eject(self, index: int) -> None:
        if 0 <= index < len(self._chain):
            self._chain[index] = None

    def clear(self) -> None:
        self._chain = []

    def handlers(self) -> List[Handlers]:
        """Registered pairs in registration order."""
        return [pair for pair in self._chain if pair is not None]

    def __len__(self) -> int:
        return len(self.handlers())


class AjaxInterceptors:
    """Holder exposing .request and .response chains."""

    def __init__(self) -> None:
        self.request: Interceptors[RequestCallback] = Interceptors()
        self.response: Interceptors[ResponseCallback] = Interceptors()


def run_request_chain(
    chain: Interceptors[RequestCallback],
    config: AjaxConfig,
    log: Optional[Logger] = None,
) -> AjaxConfig:
    """
    Run request interceptors synchronously in registration order.

    A handler may mutate config in place or return a replacement. When a
    handler raises, its paired rejected handler receives the error and the
    chain stops there; without a rejected handler the error propagates.
    """
    log = log or logger
    for fulfilled, rejected in chain.handlers():
        if fulfilled is None:
            continue
        try:
            returned = fulfilled(config)
        except Exception as error:
            log.error(f"request interceptor failed: {error}")
            if rejected is None:
                raise
            rejected(error)
            break
        if returned is not None:
            config = returned
    return config


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


async def run_response_chain(
    handlers: List[Handlers],
    outcome: Awaitable[Any],
) -> Any:
    """
    Thread outcome through the response handlers like chained .then calls.

    A fulfilled handler may transform the value or raise. A rejected handler
    may recover by returning a value or keep the failure by raising.
    """
    error: Optional[BaseException] = None
    value: Any = None
    try:
        value = await outcome
    except Exception as exc:
        error = exc

    for fulfilled, rejected in handlers:
        if error is None:
            if fulfilled is None:
                continue
            try:
                value = await _resolve(fulfilled(value))
            except Exception as exc:
                error = exc
        else:
            if rejected is None:
                continue
            try:
                value = await _resolve(rejected(error))
                error = None
            except Exception as exc:
                error = exc

    if error is not None:
        raise error
    return value
