"""
Type definitions for fetch_ajax.
"""
from dataclasses import dataclass, field
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    List,
    Literal,
    Mapping,
    Optional,
    Protocol,
    Union,
)
import asyncio

from .abort import AbortController, AbortSignal

# HTTP methods
HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]

# Browser fetch hints, passed through to the transport
Credentials = Literal["omit", "include", "same-origin"]
Mode = Literal["same-origin", "cors", "no-cors"]

QueryData = Union[str, Mapping[str, Union[str, int, float, bool]]]


@dataclass
class AjaxConfig:
    """
    Request configuration.

    Every field defaults to None so that a partial config can be overlaid onto
    the defaults. After merge, method/url/credentials/mode are always set.
    """

    url: Optional[str] = None
    base_url: Optional[str] = None
    method: Optional[str] = None
    headers: Optional[Dict[str, str]] = None
    data: Any = None
    """Folded into the URL for GET, sent as the body otherwise."""

    query: Optional[QueryData] = None
    """Query for body-bearing methods."""

    credentials: Optional[Credentials] = None
    mode: Optional[Mode] = None

    timeout: Optional[float] = None
    """Seconds before the transport call is aborted."""

    timeout_error_message: Optional[str] = None
    timeout_error_status: Optional[int] = None

    cache_timeout: Optional[float] = None
    """0 disables de-duplication, negative keeps results forever, positive is a retention in seconds."""

    cache_store: Optional[Any] = None
    """Persistent CacheStore tier."""

    ignore: Optional[List[int]] = None
    """Error statuses that resolve to None instead of raising."""

    signal: Optional[AbortSignal] = None
    """External cancellation signal. No controller is created when set."""

    is_file: Optional[bool] = None
    is_use_origin: Optional[bool] = None
    is_encode_url: Optional[bool] = None
    is_out_stop: Optional[bool] = None
    is_no_alert: Optional[bool] = None

    origin_headers: Optional[Mapping[str, str]] = None
    """Incoming headers to copy trace keys from."""

    default_put_and_post_content_type: Optional[str] = None
    default_inject_header_keys: Optional[List[str]] = None


class TransportResponse(Protocol):
    """Response surface the transport adapter relies on."""

    ok: bool
    status: int
    status_text: str
    headers: Mapping[str, str]

    async def text(self) -> str:
        ...


class Transport(Protocol):
    """Network fetch primitive."""

    async def send(
        self,
        url: str,
        *,
        method: str,
        headers: Dict[str, str],
        body: Optional[Union[str, bytes]] = None,
        credentials: Optional[str] = None,
        mode: Optional[str] = None,
        signal: Optional[AbortSignal] = None,
    ) -> TransportResponse:
        ...

    async def aclose(self) -> None:
        ...


class Logger(Protocol):
    """Logging sink. logging.Logger satisfies it."""

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        ...

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        ...


RequestCallback = Callable[[AjaxConfig], Optional[AjaxConfig]]
ErrorCallback = Callable[[BaseException], Any]
ResponseCallback = Callable[[Any], Union[Any, Awaitable[Any]]]
ErrorHandler = Callable[[BaseException, AjaxConfig], None]


@dataclass
class AjaxResult:
    """In-flight entry shared by every caller with the same fingerprint."""

    config: AjaxConfig
    promise: Optional["asyncio.Future[Any]"] = None
    controller: Optional[AbortController] = None
    signal: Optional[AbortSignal] = None
    id: Optional[str] = None
    fingerprint: Optional[str] = None
    is_from_memory_cache: bool = False
    is_from_store_cache: bool = False


@dataclass
class AbortResult:
    """A request promise paired with its cancel handle."""

    promise: "asyncio.Future[Any]"
    id: Optional[str] = None
    controller: Optional[AbortController] = field(default=None, repr=False)

    def abort(self, reason: Optional[str] = None) -> None:
        if self.controller is not None:
            self.controller.abort(reason)
