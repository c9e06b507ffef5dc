"""
Tests for abort.py
"""
import asyncio
from unittest.mock import MagicMock

import pytest

from fetch_ajax import AbortController, CancellationRegistry, FetchAbortError, FetchError, is_abort_error


class TestAbortController:
    """Tests for AbortController / AbortSignal."""

    def test_abort_fires_listeners_once(self) -> None:
        controller = AbortController()
        listener = MagicMock()
        controller.signal.add_listener(listener)

        controller.abort("stop")
        controller.abort("again")

        listener.assert_called_once_with()
        assert controller.signal.aborted is True
        assert controller.signal.reason == "stop"

    def test_removed_listener_not_called(self) -> None:
        controller = AbortController()
        listener = MagicMock()
        remove = controller.signal.add_listener(listener)

        remove()
        remove()
        controller.abort()

        listener.assert_not_called()


class TestCancellationRegistry:
    """Tests for CancellationRegistry."""

    def test_register_returns_unique_ids(self) -> None:
        registry = CancellationRegistry()
        first = registry.register(AbortController())
        second = registry.register(AbortController())

        assert first != second
        assert first in registry
        assert len(registry) == 2

    def test_abort_by_id(self) -> None:
        registry = CancellationRegistry()
        controller = AbortController()
        request_id = registry.register(controller)

        assert registry.abort(request_id, "bye") is True
        assert controller.signal.reason == "bye"

    def test_abort_unknown_id(self) -> None:
        assert CancellationRegistry().abort("missing") is False

    def test_abort_all_skips_out_stop(self) -> None:
        registry = CancellationRegistry()
        normal = AbortController()
        exempt = AbortController()
        registry.register(normal)
        registry.register(exempt, out_stop=True)

        assert registry.abort_all() == 1
        assert normal.signal.aborted is True
        assert exempt.signal.aborted is False

    def test_release(self) -> None:
        registry = CancellationRegistry()
        request_id = registry.register(AbortController())

        registry.release(request_id)
        registry.release(None)

        assert request_id not in registry
        assert registry.abort(request_id) is False

    @pytest.mark.asyncio
    async def test_release_on_settle(self) -> None:
        registry = CancellationRegistry()
        request_id = registry.register(AbortController())
        future = asyncio.get_running_loop().create_future()

        registry.release_on_settle(request_id, future)
        assert request_id in registry

        future.set_result(1)
        await asyncio.sleep(0)
        assert request_id not in registry

    @pytest.mark.asyncio
    async def test_release_on_settle_already_done(self) -> None:
        registry = CancellationRegistry()
        request_id = registry.register(AbortController())
        future = asyncio.get_running_loop().create_future()
        future.set_result(1)

        registry.release_on_settle(request_id, future)

        assert request_id not in registry


class TestErrors:
    """Tests for the error taxonomy."""

    def test_abort_error_default_message(self) -> None:
        error = FetchAbortError()
        assert error.message == "The operation was aborted."
        assert isinstance(error, FetchError)

    def test_is_abort_error(self) -> None:
        assert is_abort_error(FetchAbortError()) is True
        assert is_abort_error(FetchError("x", 500)) is False
        assert is_abort_error(ValueError()) is False

    def test_message_from_origin_error(self) -> None:
        origin = ConnectionError("refused")
        error = FetchError(origin_error=origin)
        assert error.message == "refused"
        assert str(error) == "refused"

    def test_message_from_origin_error_type_when_empty(self) -> None:
        assert FetchError(origin_error=TimeoutError()).message == "TimeoutError"
