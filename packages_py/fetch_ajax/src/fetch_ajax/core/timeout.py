"""
Race a transport call against a timer.
"""
import asyncio
import logging
from typing import Any, Awaitable, Optional, TypeVar

from ..abort import AbortController
from ..errors import FetchTimeoutError

logger = logging.getLogger("fetch_ajax.timeout")

T = TypeVar("T")


def consume_outcome(task: "asyncio.Future[Any]") -> None:
    # mark a failure as retrieved; awaiting callers still receive it
    if not task.cancelled():
        task.exception()


async def race_timeout(
    awaitable: Awaitable[T],
    timeout_seconds: Optional[float],
    controller: Optional[AbortController] = None,
    message: Optional[str] = "timeout",
    status: Optional[int] = 504,
) -> T:
    """
    Await awaitable for at most timeout_seconds.

    When the timer wins, controller is aborted and FetchTimeoutError is raised;
    the call itself is abandoned. The timer is cancelled on whichever branch
    settles first. A timeout of None disables the race.
    """
    if timeout_seconds is None:
        return await awaitable

    loop = asyncio.get_running_loop()
    task = asyncio.ensure_future(awaitable)
    timer: "asyncio.Future[None]" = loop.create_future()

    def expire() -> None:
        if not timer.done():
            timer.set_result(None)

    handle = loop.call_later(max(timeout_seconds, 0), expire)
    try:
        await asyncio.wait({task, timer}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        task.cancel()
        raise
    finally:
        handle.cancel()

    if task.done():
        return task.result()

    logger.debug(f"race_timeout: timed out after {timeout_seconds}s")
    if controller is not None:
        controller.abort(message)
    task.add_done_callback(consume_outcome)
    raise FetchTimeoutError(message, status)
