"""
Cooperative cancellation.

Provides a cancellation token that is threaded through every
suspending call of a request and aborts pending I/O when the
client goes away or the request deadline passes.
"""
import asyncio
import time
from typing import Awaitable, Optional, TypeVar

from pkg.logger.logger import get_logger


logger = get_logger(__name__)


T = TypeVar("T")

REASON_CANCELLED = "cancelled"
REASON_CLIENT_DISCONNECTED = "client_disconnected"
REASON_DEADLINE_EXCEEDED = "deadline_exceeded"


class OperationCancelledError(Exception):
    """Exception raised when an operation is aborted by its token."""

    def __init__(self, reason: str = REASON_CANCELLED) -> None:
        """
        Initialize operation cancelled error.

        Args:
            reason: Why the token fired.
        """
        self.reason = reason
        self.message = f"Operation cancelled: {reason}"
        super().__init__(self.message)

    @property
    def deadline_exceeded(self) -> bool:
        """Whether the operation ran out of time."""
        return self.reason == REASON_DEADLINE_EXCEEDED


class CancellationToken:
    """
    Cancellation signal with an optional deadline.

    A token fires either when ``cancel()`` is called or when its
    deadline passes. The first reason recorded wins.

    Attributes:
        cancelled: Whether the token has fired.
        reason: Reason the token fired, None while still live.
    """

    def __init__(self, timeout: Optional[float] = None) -> None:
        """
        Initialize the token.

        Args:
            timeout: Seconds until the token fires on its own.
                None means no deadline.
        """
        self._event = asyncio.Event()
        self._reason: Optional[str] = None
        self._deadline: Optional[float] = (
            time.monotonic() + timeout if timeout is not None else None
        )

    @classmethod
    def none(cls) -> "CancellationToken":
        """Token without a deadline, only fired by an explicit cancel."""
        return cls()

    @property
    def cancelled(self) -> bool:
        """Check whether the token has fired."""
        if self._event.is_set():
            return True
        if self._deadline is not None and time.monotonic() >= self._deadline:
            self._fire(REASON_DEADLINE_EXCEEDED)
            return True
        return False

    @property
    def reason(self) -> Optional[str]:
        """Get the reason the token fired."""
        return self._reason

    def remaining(self) -> Optional[float]:
        """
        Seconds left before the deadline.

        Returns:
            Remaining seconds (never negative), or None without a deadline.
        """
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def cancel(self, reason: str = REASON_CANCELLED) -> None:
        """
        Fire the token.

        Args:
            reason: Why the operation is being cancelled.
        """
        self._fire(reason)

    def raise_if_cancelled(self) -> None:
        """
        Raise if the token has fired.

        Raises:
            OperationCancelledError: If cancelled or past the deadline.
        """
        if self.cancelled:
            raise OperationCancelledError(self._reason or REASON_CANCELLED)

    async def run(self, awaitable: Awaitable[T]) -> T:
        """
        Await an operation under this token.

        The operation is raced against the cancel signal and the
        deadline. If the token wins, the operation is cancelled and
        awaited to completion before the error is raised, so no work
        continues in the background.

        Args:
            awaitable: Coroutine or future performing the I/O.

        Returns:
            Result of the operation.

        Raises:
            OperationCancelledError: If the token fires first.
        """
        if self.cancelled:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise OperationCancelledError(self._reason or REASON_CANCELLED)

        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait(
                {task, waiter},
                timeout=self.remaining(),
                return_when=asyncio.FIRST_COMPLETED,
            )
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            waiter.cancel()

        if task in done:
            return task.result()

        task.cancel()
        await asyncio.wait({task})
        if not self._event.is_set():
            self._fire(REASON_DEADLINE_EXCEEDED)

        logger.warning("Operation aborted by cancellation token", reason=self._reason)
        raise OperationCancelledError(self._reason or REASON_CANCELLED)

    def _fire(self, reason: str) -> None:
        if self._event.is_set():
            return
        self._reason = reason
        self._event.set()
