"""Rate-limit-aware request sending."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from datetime import timezone
from email.utils import parsedate_to_datetime

import httpx

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]

DEFAULT_RETRY_DELAY = 1.0
# Reset headers above this are absolute epoch seconds, below it a relative delay
EPOCH_THRESHOLD = 1_000_000_000


class RateLimiter:
    """Sends requests while respecting the API's rate limit headers.

    Two mechanisms are combined:

    1. When a response reports ``X-RateLimit-Remaining: 0``, the next request
       waits until ``X-RateLimit-Reset`` before going out.
    2. A ``429 Too Many Requests`` answer is re-sent after ``Retry-After``
       (or the reset header) up to ``max_retries`` times. The final 429 is
       handed back to the caller untouched.
    """

    def __init__(
        self,
        max_retries: int = 5,
        sleep: Sleep = asyncio.sleep,
        clock: Callable[[], float] = time.time,
    ):
        self.max_retries = max_retries
        self._sleep = sleep
        self._clock = clock
        self._blocked_until: float | None = None

    async def send(self, client: httpx.AsyncClient, request: httpx.Request) -> httpx.Response:
        """Send *request* through *client*, waiting out rate limits."""
        attempt = 0
        while True:
            await self._wait_for_budget()
            response = await client.send(request)
            self._record(response)

            if response.status_code != 429 or attempt >= self.max_retries:
                return response

            attempt += 1
            delay = self._retry_delay(response)
            logger.warning(
                "Rate limited on %s %s, retry %d/%d in %.1fs",
                request.method,
                request.url.path,
                attempt,
                self.max_retries,
                delay,
            )
            await self._sleep(delay)

    async def _wait_for_budget(self) -> None:
        if self._blocked_until is None:
            return
        delay = self._blocked_until - self._clock()
        self._blocked_until = None
        if delay > 0:
            logger.info("Rate limit budget exhausted, waiting %.1fs", delay)
            await self._sleep(delay)

    def _record(self, response: httpx.Response) -> None:
        remaining = response.headers.get("x-ratelimit-remaining")
        if remaining is None:
            return
        try:
            exhausted = int(float(remaining)) <= 0
        except ValueError:
            return
        if not exhausted:
            return
        delay = self._parse_delay(response.headers.get("x-ratelimit-reset"))
        if delay is not None:
            self._blocked_until = self._clock() + delay

    def _retry_delay(self, response: httpx.Response) -> float:
        for header in ("retry-after", "x-ratelimit-reset"):
            delay = self._parse_delay(response.headers.get(header))
            if delay is not None:
                return delay
        return DEFAULT_RETRY_DELAY

    def _parse_delay(self, value: str | None) -> float | None:
        """Turn a header value into seconds to wait from now."""
        if not value:
            return None
        try:
            number = float(value)
        except ValueError:
            try:
                moment = parsedate_to_datetime(value)
            except (TypeError, ValueError):
                return None
            # "-0000" dates come back naive but are still UTC
            if moment.tzinfo is None:
                moment = moment.replace(tzinfo=timezone.utc)
            return max(moment.timestamp() - self._clock(), 0.0)

        if number > EPOCH_THRESHOLD:
            return max(number - self._clock(), 0.0)
        return max(number, 0.0)
