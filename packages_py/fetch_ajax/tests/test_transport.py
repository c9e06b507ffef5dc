"""
Tests for core/transport.py (httpx-backed transport).
"""
import json

import httpx
import pytest

from fetch_ajax import Ajax, AjaxSettings, FetchError, HttpxResponse, HttpxTransport
from fetch_ajax.core.transport import _is_ssl_verify_disabled_by_env


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestSslEnv:
    """Tests for _is_ssl_verify_disabled_by_env()."""

    def test_enabled_by_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("NODE_TLS_REJECT_UNAUTHORIZED", raising=False)
        monkeypatch.delenv("SSL_CERT_VERIFY", raising=False)
        assert _is_ssl_verify_disabled_by_env() is False

    @pytest.mark.parametrize("name", ["NODE_TLS_REJECT_UNAUTHORIZED", "SSL_CERT_VERIFY"])
    def test_disabled(self, monkeypatch: pytest.MonkeyPatch, name: str) -> None:
        monkeypatch.setenv(name, "0")
        assert _is_ssl_verify_disabled_by_env() is True


class TestHttpxTransport:
    """Tests for HttpxTransport."""

    @pytest.mark.asyncio
    async def test_send_passes_request(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["header"] = request.headers.get("x-test")
            seen["body"] = request.content
            return httpx.Response(201, json={"id": 1})

        transport = HttpxTransport(_client(handler))
        response = await transport.send(
            "http://api.test/items",
            method="POST",
            headers={"x-test": "yes"},
            body='{"a": 1}',
        )

        assert seen == {
            "method": "POST",
            "url": "http://api.test/items",
            "header": "yes",
            "body": b'{"a": 1}',
        }
        assert isinstance(response, HttpxResponse)
        assert response.ok is True
        assert response.status == 201
        assert response.status_text == "Created"
        assert json.loads(await response.text()) == {"id": 1}

    @pytest.mark.asyncio
    async def test_error_status_not_ok(self) -> None:
        transport = HttpxTransport(_client(lambda request: httpx.Response(404, text="missing")))

        response = await transport.send("http://api.test/x", method="GET", headers={})

        assert response.ok is False
        assert response.status == 404
        assert response.status_text == "Not Found"

    @pytest.mark.asyncio
    async def test_shared_client_not_closed(self) -> None:
        client = _client(lambda request: httpx.Response(200))
        transport = HttpxTransport(client)

        await transport.aclose()

        assert client.is_closed is False
        await client.aclose()

    @pytest.mark.asyncio
    async def test_owned_client_closed(self) -> None:
        client = _client(lambda request: httpx.Response(200))
        transport = HttpxTransport(client, close_client=True)

        await transport.aclose()

        assert client.is_closed is True

    @pytest.mark.asyncio
    async def test_default_client_created_and_closed(self) -> None:
        transport = HttpxTransport()
        client = transport._client

        assert isinstance(client, httpx.AsyncClient)
        await transport.aclose()
        assert client.is_closed is True


class TestAjaxOverHttpx:
    """End-to-end through Ajax with httpx.MockTransport."""

    @pytest.mark.asyncio
    async def test_json_response(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"path": request.url.path, "q": request.url.query.decode()})

        async with Ajax(HttpxTransport(_client(handler)), settings=AjaxSettings()) as ajax:
            result = await ajax.get("http://api.test/items", {"page": 1})

        assert result == {"path": "/items", "q": "page=1"}

    @pytest.mark.asyncio
    async def test_connection_error_wrapped(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with Ajax(HttpxTransport(_client(handler)), settings=AjaxSettings()) as ajax:
            with pytest.raises(FetchError) as exc_info:
                await ajax.get("http://api.test/items")

        assert isinstance(exc_info.value.origin_error, httpx.ConnectError)
        assert exc_info.value.status is None

    @pytest.mark.asyncio
    async def test_error_body_becomes_message(self) -> None:
        handler = lambda request: httpx.Response(400, text="bad input")  # noqa: E731

        async with Ajax(HttpxTransport(_client(handler)), settings=AjaxSettings()) as ajax:
            with pytest.raises(FetchError) as exc_info:
                await ajax.post("http://api.test/items", {"a": 1})

        assert exc_info.value.status == 400
        assert exc_info.value.message == "bad input"
