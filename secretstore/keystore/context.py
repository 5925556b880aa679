"""Cancellation and deadline tokens passed to every store operation."""

import threading
import time
from typing import Optional


class OperationCanceledError(Exception):
    """Raised when the caller canceled the operation's context."""

    def __init__(self, message: str = "context canceled"):
        super().__init__(message)


class DeadlineExceededError(Exception):
    """Raised when the operation's context deadline has passed."""

    def __init__(self, message: str = "context deadline exceeded"):
        super().__init__(message)


class Context:
    """
    Carries a deadline and a cancellation signal across store calls.

    A store checks the context before every vendor call and reports the
    context's error, not a vendor error, once the context is done.

    Usage:
        ctx = Context(timeout=5.0)
        value = store.get(ctx, "my-key")

        # Derive a tighter deadline for a single call
        store.status(ctx.with_timeout(1.0))

        # Cancel from another thread
        ctx.cancel()
    """

    def __init__(self, timeout: Optional[float] = None, parent: Optional["Context"] = None):
        """
        Args:
            timeout: Seconds until the deadline (None = no deadline)
            parent: Parent context; its deadline and cancellation are inherited
        """
        self._cancelled = threading.Event()
        self.parent = parent

        deadline = time.monotonic() + timeout if timeout is not None else None
        if parent is not None and parent.deadline is not None:
            deadline = parent.deadline if deadline is None else min(deadline, parent.deadline)
        self.deadline = deadline

    @classmethod
    def background(cls) -> "Context":
        """Return a context that is never canceled and has no deadline."""
        return cls()

    def with_timeout(self, timeout: float) -> "Context":
        """Return a child context that expires after `timeout` seconds at the latest."""
        return Context(timeout=timeout, parent=self)

    def cancel(self) -> None:
        """Cancel this context and all contexts derived from it."""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        if self._cancelled.is_set():
            return True
        return self.parent is not None and self.parent.cancelled

    def remaining(self) -> Optional[float]:
        """Seconds left until the deadline, never negative. None if no deadline."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def err(self) -> Optional[Exception]:
        """Return the error describing why the context is done, or None."""
        if self.cancelled:
            return OperationCanceledError()
        if self.deadline is not None and time.monotonic() >= self.deadline:
            return DeadlineExceededError()
        return None

    def done(self) -> bool:
        return self.err() is not None

    def check(self) -> None:
        """Raise the context error if the context is done."""
        err = self.err()
        if err is not None:
            raise err

    def __repr__(self) -> str:
        return f"Context(remaining={self.remaining()}, cancelled={self.cancelled})"
