"""
Default network transport using httpx.
"""
import logging
import os
from typing import Dict, Optional, Union

import httpx

from ..abort import AbortSignal

logger = logging.getLogger("fetch_ajax.transport")


def _is_ssl_verify_disabled_by_env() -> bool:
    """
    Check if SSL verification is disabled via environment variables.

    Returns True if any of these are set:
    - NODE_TLS_REJECT_UNAUTHORIZED=0
    - SSL_CERT_VERIFY=0
    """
    node_tls = os.environ.get("NODE_TLS_REJECT_UNAUTHORIZED", "")
    ssl_cert_verify = os.environ.get("SSL_CERT_VERIFY", "")
    return node_tls == "0" or ssl_cert_verify == "0"


class HttpxResponse:
    """Adapts httpx.Response to the ok/status/status_text/text() surface."""

    def __init__(self, response: httpx.Response) -> None:
        self.raw = response

    @property
    def ok(self) -> bool:
        return 200 <= self.raw.status_code < 300

    @property
    def status(self) -> int:
        return self.raw.status_code

    @property
    def status_text(self) -> str:
        return self.raw.reason_phrase or ""

    @property
    def headers(self) -> httpx.Headers:
        return self.raw.headers

    async def text(self) -> str:
        await self.raw.aread()
        return self.raw.text

    def __repr__(self) -> str:
        return f"HttpxResponse(status={self.status}, url={str(self.raw.request.url)!r})"


class HttpxTransport:
    """
    Transport backed by httpx.AsyncClient.

    credentials and mode are browser fetch hints with no httpx equivalent;
    they are accepted and ignored.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        *,
        close_client: Optional[bool] = None,
    ) -> None:
        self._owns_client = client is None if close_client is None else close_client
        if client is None:
            verify_ssl = not _is_ssl_verify_disabled_by_env()
            # Timeouts are enforced by the orchestration layer
            client = httpx.AsyncClient(timeout=None, verify=verify_ssl)
        self._client = client

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
    ) -> HttpxResponse:
        logger.debug(f"HttpxTransport.send: method={method}, url={url}")
        response = await self._client.request(
            method=method,
            url=url,
            headers=headers,
            content=body,
        )
        return HttpxResponse(response)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
