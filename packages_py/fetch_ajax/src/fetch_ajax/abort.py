"""
Cancellation primitives and the registry of in-flight controllers.
"""
import asyncio
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger("fetch_ajax.abort")


class AbortSignal:
    """Read side of an AbortController."""

    def __init__(self) -> None:
        self.aborted = False
        self.reason: Optional[str] = None
        self._listeners: List[Callable[[], Any]] = []

    def add_listener(self, listener: Callable[[], Any]) -> Callable[[], None]:
        """Run listener once on abort. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def _fire(self, reason: Optional[str]) -> None:
        self.aborted = True
        self.reason = reason
        listeners, self._listeners = self._listeners, []
        for listener in listeners:
            listener()


class AbortController:
    """Owns a signal and triggers it."""

    def __init__(self) -> None:
        self.signal = AbortSignal()

    def abort(self, reason: Optional[str] = None) -> None:
        if self.signal.aborted:
            return
        self.signal._fire(reason)


@dataclass
class _TrackedRequest:
    controller: AbortController
    out_stop: bool = False


class CancellationRegistry:
    """
    Tracks the controller of every orchestrated request until it settles.

    Requests that carry an externally supplied signal have no controller and
    are never tracked here.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, _TrackedRequest] = {}

    def register(self, controller: AbortController, out_stop: bool = False) -> str:
        request_id = uuid.uuid4().hex
        self._entries[request_id] = _TrackedRequest(controller, out_stop)
        return request_id

    def release(self, request_id: Optional[str]) -> None:
        if request_id is not None:
            self._entries.pop(request_id, None)

    def release_on_settle(self, request_id: Optional[str], future: "asyncio.Future[Any]") -> None:
        """Drop the entry once future settles."""
        if request_id is None:
            return
        if future.done():
            self.release(request_id)
            return
        future.add_done_callback(lambda _: self.release(request_id))

    def abort(self, request_id: str, reason: Optional[str] = None) -> bool:
        entry = self._entries.get(request_id)
        if entry is None:
            return False
        entry.controller.abort(reason)
        return True

    def abort_all(self, reason: Optional[str] = None) -> int:
        """Abort every tracked request except those flagged out_stop."""
        count = 0
        for request_id, entry in list(self._entries.items()):
            if entry.out_stop:
                logger.debug(f"abort_all: skipping out_stop request {request_id}")
                continue
            entry.controller.abort(reason)
            count += 1
        return count

    def __contains__(self, request_id: object) -> bool:
        return request_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)
