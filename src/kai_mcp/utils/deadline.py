"""Cancellable deadlines for cluster calls."""

from __future__ import annotations

import threading
import time

from kai_mcp.utils.errors import DeadlineExceededError


class Deadline:
    """A point in time after which a call must stop, plus a cancel switch.

    Deadlines form a tree: a child never outlives its parent and is
    cancelled when the parent is. Each API call gets a child of the
    caller's deadline bounded by the read or write timeout.

    Example:
        deadline = Deadline(timeout=60)
        read = deadline.child(20)
        api.read_namespaced_pod(name, ns, _request_timeout=read.request_timeout())
    """

    def __init__(self, timeout: float | None = None, parent: Deadline | None = None) -> None:
        self._event = threading.Event()
        self._parent = parent
        expires_at = None if timeout is None else time.monotonic() + timeout
        if parent is not None and parent._expires_at is not None:
            if expires_at is None or parent._expires_at < expires_at:
                expires_at = parent._expires_at
        self._expires_at = expires_at

    def child(self, timeout: float | None) -> Deadline:
        """Derive a deadline that ends after ``timeout`` or with this one."""
        return Deadline(timeout, parent=self)

    def cancel(self) -> None:
        """Cancel this deadline and every deadline derived from it."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self._parent is not None and self._parent.cancelled

    def remaining(self) -> float | None:
        """Seconds left, or None when unbounded."""
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - time.monotonic())

    @property
    def expired(self) -> bool:
        if self.cancelled:
            return True
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    def request_timeout(self) -> float | None:
        """Timeout to hand to the kubernetes client for the next request."""
        return self.remaining()

    def check(self, kind: str, name: str | None = None, namespace: str | None = None) -> None:
        """Raise if the deadline is cancelled or has passed."""
        if self.cancelled:
            raise DeadlineExceededError(
                f"{kind} '{name}' operation cancelled", kind, name, namespace
            )
        if self.expired:
            raise DeadlineExceededError(
                f"{kind} '{name}' operation timed out", kind, name, namespace
            )

    def wait(self, seconds: float) -> bool:
        """Sleep up to ``seconds``, waking early on cancellation.

        Returns:
            True if the full wait elapsed, False if the deadline ended first.
        """
        remaining = self.remaining()
        if remaining is not None and remaining < seconds:
            self._wait_event(remaining)
            return False
        return not self._wait_event(seconds)

    def _wait_event(self, seconds: float) -> bool:
        """Wait on this deadline's cancel event or any ancestor's."""
        end = time.monotonic() + seconds
        node: Deadline | None = self
        events = []
        while node is not None:
            events.append(node._event)
            node = node._parent
        while True:
            if any(event.is_set() for event in events):
                return True
            left = end - time.monotonic()
            if left <= 0:
                return False
            # Ancestors are polled so a parent's cancel wakes the sleep promptly
            self._event.wait(min(left, 0.05))
