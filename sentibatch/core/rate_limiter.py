"""Client-side request throttling over a fixed one-minute window."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from sentibatch.core.sinks import ProgressSink

logger = logging.getLogger("sentibatch.rate_limit")


@dataclass(slots=True)
class RateLimitState:
    window_start: Optional[float]
    count: int


class RequestRateLimiter:
    """Caps outbound requests to ``limit`` per ``window`` seconds.

    ``acquire`` blocks once the cap is reached inside the current window and
    resumes when the window has run out. Clock and sleep are injectable so
    callers can drive the limiter without real waits.
    """

    def __init__(
        self,
        sink: ProgressSink,
        limit: int = 60,
        window: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if limit <= 0:
            raise ValueError("limit must be positive")
        if window <= 0:
            raise ValueError("window must be positive")
        self.sink = sink
        self.limit = limit
        self.window = window
        self._clock = clock
        self._sleep = sleep
        self._state = RateLimitState(window_start=None, count=0)

    @property
    def count(self) -> int:
        return self._state.count

    @property
    def window_start(self) -> Optional[float]:
        return self._state.window_start

    def acquire(self) -> None:
        """Wait until a request may be sent, then count it."""

        state = self._state
        now = self._clock()
        if state.window_start is None:
            state.window_start = now

        elapsed = now - state.window_start
        if elapsed >= self.window:
            state.window_start = now
            state.count = 0
        elif state.count >= self.limit:
            wait = self.window - elapsed
            self.sink.log(f"Rate limit reached. Waiting for {wait:g} seconds.")
            logger.info("rate_limit.wait", extra={"wait_sec": wait, "count": state.count})
            self._sleep(wait)
            state.window_start = self._clock()
            state.count = 0

        state.count += 1


__all__ = ["RateLimitState", "RequestRateLimiter"]
