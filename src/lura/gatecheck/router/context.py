# SPDX-FileCopyrightText: 2026 H2Lab
#
# SPDX-License-Identifier: Apache-2.0

import threading
import time


class Context:
    """Cancellation and deadline shared between a caller and a running router."""

    def __init__(self, deadline: float | None = None) -> None:
        self._deadline = deadline
        self._cancelled = threading.Event()

    @classmethod
    def with_timeout(cls, timeout: float) -> "Context":
        return cls(time.monotonic() + timeout)

    def remaining(self) -> float | None:
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def cancel(self) -> None:
        self._cancelled.set()

    def err(self) -> str | None:
        if self._cancelled.is_set():
            return "context canceled"
        if self._deadline is not None and time.monotonic() >= self._deadline:
            return "context deadline exceeded"
        return None

    def done(self) -> bool:
        return self.err() is not None

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the context is done or `timeout` elapsed, return `done()`."""
        remaining = self.remaining()
        if remaining is not None:
            timeout = remaining if timeout is None else min(timeout, remaining)
        self._cancelled.wait(timeout)
        return self.done()
