"""
Error taxonomy for fetch_ajax.

Every failure surfaced to a caller is a FetchError. Subclasses let callers tell
timeouts and cancellations apart from HTTP or network failures.
"""
from typing import Any, Optional


class FetchError(Exception):
    """HTTP-status or transport failure."""

    def __init__(
        self,
        message: Optional[str] = None,
        status: Optional[int] = None,
        *,
        origin_error: Optional[BaseException] = None,
        response: Optional[Any] = None,
    ) -> None:
        if message is None and origin_error is not None:
            message = str(origin_error) or type(origin_error).__name__
        super().__init__(message or "")
        self.message = message or ""
        self.status = status
        self.origin_error = origin_error
        self.response = response

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r}, status={self.status!r})"


class FetchTimeoutError(FetchError):
    """The transport call did not settle within the configured timeout."""


class FetchAbortError(FetchError):
    """The request was cancelled through its controller or signal."""

    def __init__(self, message: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(message or "The operation was aborted.", **kwargs)


class FetchStoppedError(FetchError):
    """Requests are stopped and this call did not opt out."""


def is_abort_error(error: BaseException) -> bool:
    """Return True when the error came from a cancellation."""
    return isinstance(error, FetchAbortError)
