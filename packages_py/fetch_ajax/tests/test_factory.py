"""
Tests for factory.py
"""
import httpx
import pytest

from fetch_ajax import Ajax, AjaxSettings, HttpxTransport, MemoryInFlightStore, create_ajax, create_httpx_transport

from .conftest import FakeClock, MockTransport


class TestCreateHttpxTransport:
    """Tests for create_httpx_transport()."""

    @pytest.mark.asyncio
    async def test_default(self) -> None:
        transport = create_httpx_transport()
        assert isinstance(transport, HttpxTransport)
        await transport.aclose()

    @pytest.mark.asyncio
    async def test_shared_client_kept_open(self) -> None:
        client = httpx.AsyncClient()
        transport = create_httpx_transport(client)

        await transport.aclose()

        assert client.is_closed is False
        await client.aclose()

    @pytest.mark.asyncio
    async def test_client_kwargs_build_owned_client(self) -> None:
        transport = create_httpx_transport(headers={"x-app": "demo"})

        assert transport._client.headers["x-app"] == "demo"
        assert transport._client.timeout.connect is None
        await transport.aclose()
        assert transport._client.is_closed is True


class TestCreateAjax:
    """Tests for create_ajax()."""

    @pytest.mark.asyncio
    async def test_defaults(self) -> None:
        transport = MockTransport()
        ajax = create_ajax(transport)

        assert isinstance(ajax, Ajax)
        assert ajax.settings.defaults.method == "POST"
        await ajax.close()

    @pytest.mark.asyncio
    async def test_shared_settings(self) -> None:
        settings = AjaxSettings()
        first = create_ajax(MockTransport(), settings=settings)
        second = create_ajax(MockTransport(), settings=settings)

        first.stop()

        assert second.is_stopped() is True

    @pytest.mark.asyncio
    async def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FETCH_AJAX_TIMEOUT", "9")

        ajax = create_ajax(MockTransport(), from_env=True)

        assert ajax.settings.defaults.timeout == 9.0

    @pytest.mark.asyncio
    async def test_in_flight_store_used(self) -> None:
        clock = FakeClock()
        transport = MockTransport()
        ajax = create_ajax(transport, in_flight_store=MemoryInFlightStore(clock=clock))

        await ajax.get("http://localhost/x", cache_timeout=5)
        await ajax.get("http://localhost/x", cache_timeout=5)
        clock.advance(6)
        await ajax.get("http://localhost/x", cache_timeout=5)

        assert transport.call_count == 2
