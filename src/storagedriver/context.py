"""Request-scoped cancellation for driver operations.

A RequestContext travels with every driver call. Long-running operations
(streamed reads and writes) check it between chunks, so cancelling the
context or letting its deadline pass makes in-flight calls return promptly
with an error instead of hanging.
"""

import threading
import time
from typing import Optional

from .errors import DeadlineExceededError, RequestCancelledError


class RequestContext:
    """Cancellable, optionally deadline-bound request context.

    Thread-safe: cancel() may be called from any thread while other threads
    are blocked in driver operations that hold the same context.
    """

    def __init__(self, timeout: Optional[float] = None):
        """
        Initialize a request context.

        Args:
            timeout: Seconds until the deadline, or None for no deadline
        """
        self.timeout = timeout
        self.deadline = time.monotonic() + timeout if timeout is not None else None
        self._cancelled = threading.Event()
        self._reason = ""

    @classmethod
    def background(cls) -> "RequestContext":
        """Context that is never cancelled and has no deadline."""
        return cls()

    def cancel(self, reason: str = "request cancelled") -> None:
        """Cancel the context. Idempotent."""
        if not self._cancelled.is_set():
            self._reason = reason
            self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None without a deadline."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def check(self) -> None:
        """
        Raise if the context is done.

        Raises:
            RequestCancelledError: If cancel() was called
            DeadlineExceededError: If the deadline has passed
        """
        if self._cancelled.is_set():
            raise RequestCancelledError(self._reason)
        if self.expired:
            raise DeadlineExceededError(self.timeout)
