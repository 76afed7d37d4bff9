"""In-process cache of the latest aggregation snapshot."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable

from statuswatch.status.models import AggregateResult


class SnapshotCache:
    """Serve the last :class:`AggregateResult` until it is ``ttl`` seconds old.

    Concurrent callers arriving while a refresh is running wait for that
    refresh instead of starting their own cycle.
    """

    def __init__(
        self,
        collect: Callable[[], Awaitable[AggregateResult]],
        ttl: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._collect = collect
        self._ttl = ttl
        self._clock = clock
        self._snapshot: AggregateResult | None = None
        self._taken_at = 0.0
        self._lock = asyncio.Lock()

    def _fresh(self) -> bool:
        return self._snapshot is not None and self._clock() - self._taken_at < self._ttl

    async def get(self) -> AggregateResult:
        if self._fresh():
            assert self._snapshot is not None
            return self._snapshot
        async with self._lock:
            if not self._fresh():
                snapshot = await self._collect()
                self._snapshot = snapshot
                self._taken_at = self._clock()
            assert self._snapshot is not None
            return self._snapshot
