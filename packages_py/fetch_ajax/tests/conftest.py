"""Pytest configuration and fixtures for fetch_ajax tests."""
import asyncio
from typing import AsyncGenerator, Callable, List, Optional

import pytest

from fetch_ajax import Ajax, AjaxSettings, FingerprintCache, MemoryInFlightStore


class MockResponse:
    """Minimal fetch-style response."""

    def __init__(
        self,
        status: int = 200,
        body: str = '{"success": true}',
        status_text: str = "OK",
        headers: Optional[dict] = None,
    ) -> None:
        self.status = status
        self.status_text = status_text
        self.headers = headers or {"content-type": "application/json"}
        self._body = body
        self.text_calls = 0

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    async def text(self) -> str:
        self.text_calls += 1
        return self._body


class MockTransport:
    """Mock transport recording every send."""

    def __init__(
        self,
        response: Optional[MockResponse] = None,
        responder: Optional[Callable[[dict], MockResponse]] = None,
        delay: float = 0.0,
        error: Optional[Exception] = None,
    ) -> None:
        self.response = response
        self.responder = responder
        self.delay = delay
        self.error = error
        self.calls: List[dict] = []
        self.cancelled = 0
        self.closed = False

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def send(
        self,
        url,
        *,
        method,
        headers,
        body=None,
        credentials=None,
        mode=None,
        signal=None,
    ):
        call = {
            "url": url,
            "method": method,
            "headers": headers,
            "body": body,
            "credentials": credentials,
            "mode": mode,
            "signal": signal,
        }
        self.calls.append(call)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled += 1
            raise
        if self.error is not None:
            raise self.error
        if self.responder is not None:
            return self.responder(call)
        return self.response or MockResponse()

    async def aclose(self) -> None:
        self.closed = True


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def mock_transport() -> MockTransport:
    """Create a mock transport for testing."""
    return MockTransport()


@pytest.fixture
def slow_transport() -> MockTransport:
    """Mock transport that takes a while to answer."""
    return MockTransport(delay=0.05)


@pytest.fixture
def hanging_transport() -> MockTransport:
    """Mock transport that never answers on its own."""
    return MockTransport(delay=3600)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
async def ajax(mock_transport: MockTransport) -> AsyncGenerator[Ajax, None]:
    """Create an Ajax instance over the mock transport."""
    instance = Ajax(mock_transport, settings=AjaxSettings())
    yield instance
    await instance.close()


@pytest.fixture
async def clocked_ajax(mock_transport: MockTransport, clock: FakeClock) -> AsyncGenerator[Ajax, None]:
    """Ajax whose memory tier uses the fake clock."""
    cache = FingerprintCache(MemoryInFlightStore(clock=clock))
    instance = Ajax(mock_transport, settings=AjaxSettings(), cache=cache)
    yield instance
    await instance.close()
