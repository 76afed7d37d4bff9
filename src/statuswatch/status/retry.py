"""Bounded-attempt retry policy with a per-attempt deadline."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class Attempt(Generic[T]):
    """Outcome of a single attempt."""

    number: int
    value: T | None = None
    error: Exception | None = None
    timed_out: bool = False
    duration_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None and not self.timed_out

    def describe(self) -> str:
        if self.timed_out:
            return "timed out"
        if self.error is not None:
            return f"{type(self.error).__name__}: {self.error}"
        return "completed"


def retry_on_failure(attempt: Attempt[object]) -> bool:
    return not attempt.ok


@dataclass(frozen=True)
class RetryPolicy:
    """Run an async operation up to ``max_attempts`` times.

    Each attempt is cancelled once ``timeout`` seconds elapse. ``should_retry``
    decides from an attempt's outcome whether another attempt is made.
    Exceptions listed in ``retry_on`` are captured into the outcome; anything
    else propagates to the caller.
    """

    max_attempts: int = 2
    timeout: float = 30.0
    retry_delay: float = 0.0
    retry_on: tuple[type[Exception], ...] = (Exception,)
    should_retry: Callable[[Attempt[object]], bool] = retry_on_failure

    async def run(self, operation: Callable[[], Awaitable[T]], label: str = "operation") -> Attempt[T]:
        attempt: Attempt[T] | None = None
        for number in range(1, max(self.max_attempts, 1) + 1):
            start = time.monotonic()
            try:
                value = await asyncio.wait_for(operation(), timeout=self.timeout)
            except TimeoutError:
                attempt = Attempt(number=number, timed_out=True)
            except self.retry_on as exc:
                attempt = Attempt(number=number, error=exc)
            else:
                attempt = Attempt(number=number, value=value)
            attempt.duration_ms = round((time.monotonic() - start) * 1000, 1)

            if number >= self.max_attempts or not self.should_retry(attempt):
                break

            logger.info(
                "%s failed (attempt %d/%d, %s after %.1fms), retrying",
                label,
                number,
                self.max_attempts,
                attempt.describe(),
                attempt.duration_ms,
            )
            if self.retry_delay:
                await asyncio.sleep(self.retry_delay)

        assert attempt is not None
        return attempt
