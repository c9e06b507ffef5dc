"""
Transport adapter: turns a merged config into one transport call and
classifies the outcome.
"""
import asyncio
import json
import logging
from typing import Any, Awaitable, Optional, TypeVar

from ..abort import AbortSignal
from ..errors import FetchAbortError, FetchError
from ..types import AjaxConfig, Logger, Transport, TransportResponse
from .request_builder import build_request

logger = logging.getLogger("fetch_ajax.adapter")

T = TypeVar("T")


def json_parse(text: str) -> Any:
    """Parse text as JSON, falling back to the text itself."""
    try:
        return json.loads(text)
    except ValueError:
        return text


async def abortable(awaitable: Awaitable[T], signal: Optional[AbortSignal]) -> T:
    """
    Await awaitable, cancelling it when signal fires.

    Cancellation caused by the signal surfaces as FetchAbortError. Any other
    cancellation propagates unchanged.
    """
    if signal is None:
        return await awaitable
    if signal.aborted:
        if asyncio.iscoroutine(awaitable):
            awaitable.close()
        raise FetchAbortError(signal.reason)

    task = asyncio.ensure_future(awaitable)
    remove = signal.add_listener(task.cancel)
    try:
        return await task
    except asyncio.CancelledError:
        if signal.aborted and task.cancelled():
            raise FetchAbortError(signal.reason) from None
        raise
    finally:
        remove()


class TransportAdapter:
    """Invokes the transport for a merged config."""

    def __init__(self, transport: Transport, log: Optional[Logger] = None) -> None:
        self._transport = transport
        self._logger = log or logger

    @property
    def transport(self) -> Transport:
        return self._transport

    async def request(self, config: AjaxConfig, signal: Optional[AbortSignal] = None) -> Any:
        """
        Perform the call described by config.

        Returns the parsed body, None for an ignored error status, or the raw
        response when is_use_origin is set. Raises FetchError otherwise.
        """
        url, body, headers = build_request(config)
        method = (config.method or "GET").upper()

        try:
            response: TransportResponse = await abortable(
                self._transport.send(
                    url,
                    method=method,
                    headers=headers,
                    body=body,
                    credentials=config.credentials,
                    mode=config.mode,
                    signal=signal,
                ),
                signal,
            )
        except FetchError:
            raise
        except Exception as error:
            raise FetchError(origin_error=error) from error

        if not response.ok:
            if config.is_use_origin:
                raise FetchError(
                    response.status_text or f"HTTP {response.status}",
                    response.status,
                    response=response,
                )
            if config.ignore and response.status in config.ignore:
                self._logger.debug(f"ignored status {response.status} for {url}")
                return None
            text = await self._read_text(response, signal)
            raise FetchError(text or response.status_text, response.status, response=response)

        if config.is_use_origin:
            return response

        return json_parse(await self._read_text(response, signal))

    async def _read_text(self, response: TransportResponse, signal: Optional[AbortSignal]) -> str:
        try:
            return await abortable(response.text(), signal)
        except FetchError:
            raise
        except Exception as error:
            raise FetchError(origin_error=error, status=response.status) from error
