"""Per-call cancellation and deadline handling.

The MinIO SDK is synchronous and cannot abort an in-flight request, so
cancellation is cooperative: operations call ``raise_if_done`` before each
backend round trip and between the items of a traversal.
"""

from __future__ import annotations

import threading
import time

from datastore_minio.storage.contracts import OperationCancelledError


class CallContext:
    """Cancellation token with an optional monotonic deadline.

    Safe to cancel from another thread.
    """

    def __init__(self, timeout: float | None = None):
        self._event = threading.Event()
        self.deadline: float | None = None
        if timeout is not None:
            self.deadline = time.monotonic() + timeout

    @classmethod
    def with_timeout(cls, seconds: float) -> "CallContext":
        return cls(timeout=seconds)

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    def done(self) -> bool:
        return self.cancelled or self.expired

    def raise_if_done(self, op: str, bucket: str | None = None, key: str | None = None) -> None:
        if self.cancelled:
            raise OperationCancelledError(op, bucket, key, "context cancelled")
        if self.expired:
            raise OperationCancelledError(op, bucket, key, "context deadline exceeded")


def check(ctx: CallContext | None, op: str, bucket: str | None = None, key: str | None = None) -> None:
    """``raise_if_done`` for an optional context."""
    if ctx is not None:
        ctx.raise_if_done(op, bucket, key)


__all__ = ["CallContext", "check"]
