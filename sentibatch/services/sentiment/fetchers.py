"""HTTP access to the Tradestie Reddit sentiment endpoint."""
from __future__ import annotations

import datetime as dt
import logging
import time
from typing import Callable, Mapping, Optional

import requests

from sentibatch.core.rate_limiter import RequestRateLimiter
from sentibatch.core.sinks import ProgressSink

log = logging.getLogger("sentibatch.fetch")

TOO_MANY_REQUESTS = 429
MAX_RETRY_AFTER_SEC = 3600.0


class RateLimitError(Exception):
    """Raised when 429 retries are exhausted."""


def build_url(base_url: str, day: dt.date) -> str:
    """Return the endpoint URL for ``day`` (``?date=YYYY-MM-DD``)."""

    return f"{base_url.rstrip('/')}?date={day.year:04d}-{day.month:02d}-{day.day:02d}"


def parse_retry_after(
    headers: Optional[Mapping[str, str]],
    default: float = 60.0,
    ceiling: float = MAX_RETRY_AFTER_SEC,
) -> float:
    """Whole seconds to wait according to ``Retry-After``, or ``default``.

    Only plain non-negative integers are honoured; the result never exceeds
    ``ceiling``.
    """

    if not headers:
        return default
    raw = headers.get("Retry-After")
    if raw is None:
        return default
    text = str(raw).strip()
    if not (text.isascii() and text.isdigit()):
        return default
    if len(text) > 9:
        return ceiling
    return min(float(int(text)), ceiling)


class TradestieFetcher:
    """Fetch raw daily payloads, honouring local and server throttling."""

    def __init__(
        self,
        limiter: RequestRateLimiter,
        sink: ProgressSink,
        session: Optional[requests.Session] = None,
        timeout: float = 30.0,
        default_retry_after: float = 60.0,
        max_retries: Optional[int] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.limiter = limiter
        self.sink = sink
        self.session = session or requests.Session()
        self.timeout = timeout
        self.default_retry_after = default_retry_after
        self.max_retries = max_retries
        self._sleep = sleep

    def fetch(self, url: str) -> str:
        """Return the body for ``url``; transport errors propagate."""

        retries = 0
        while True:
            self.limiter.acquire()
            response = self.session.get(url, timeout=self.timeout)

            if response.status_code != TOO_MANY_REQUESTS:
                if not 200 <= response.status_code < 300:
                    log.warning(
                        "fetch.unexpected_status",
                        extra={"url": url, "status": response.status_code},
                    )
                return response.text

            if self.max_retries is not None and retries >= self.max_retries:
                raise RateLimitError(f"Max retries exceeded after 429 responses for {url}")
            retries += 1
            wait = parse_retry_after(response.headers, self.default_retry_after)
            self.sink.log(f"Rate limit hit. Waiting for {wait:g} seconds.")
            log.info("fetch.throttled", extra={"url": url, "wait_sec": wait, "attempt": retries})
            self._sleep(wait)


__all__ = ["RateLimitError", "TradestieFetcher", "build_url", "parse_retry_after"]
