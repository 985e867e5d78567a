from __future__ import annotations

import asyncio
import threading
import time
from typing import Callable, Dict, Optional

from loguru import logger

from drawguard.domain.models import CounterEntry, Decision
from drawguard.domain.policies import Policy


Clock = Callable[[], int]


def epoch_ms() -> int:
    return time.time_ns() // 1_000_000


class RateLimiter:
    """
    In-memory fixed-window rate limiter, one instance per policy.

    Every check counts, rejected ones included; admission is `count <= max_requests`.
    A window resets hard at `reset_at`, so bursts of up to twice the quota are
    possible around a boundary.
    """

    def __init__(
        self,
        policy: Policy,
        *,
        cleanup_interval_sec: float = 300,
        clock: Clock = epoch_ms,
    ) -> None:
        self._policy = policy
        self._cleanup_interval = cleanup_interval_sec
        self._clock = clock
        self._entries: Dict[str, CounterEntry] = {}
        # read-decide-write must stay atomic even if handlers run on executor threads
        self._lock = threading.Lock()
        self._sweeper: Optional[asyncio.Task[None]] = None

    @property
    def policy(self) -> Policy:
        return self._policy

    def __len__(self) -> int:
        return len(self._entries)

    def now(self) -> int:
        return self._clock()

    def check(self, identifier: str) -> Decision:
        limit = self._policy.max_requests
        now = self._clock()

        with self._lock:
            entry = self._entries.get(identifier)
            if entry is None or entry.reset_at <= now:
                entry = CounterEntry(count=1, reset_at=now + self._policy.window_ms)
                self._entries[identifier] = entry
                return Decision(allowed=True, limit=limit, remaining=limit - 1, reset_time=entry.reset_at)

            entry.count += 1
            count = entry.count
            reset_at = entry.reset_at

        return Decision(allowed=count <= limit, limit=limit, remaining=max(0, limit - count), reset_time=reset_at)

    def cleanup(self) -> int:
        """Drop entries whose window has elapsed. Returns how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [key for key, entry in self._entries.items() if entry.reset_at <= now]
            for key in expired:
                del self._entries[key]

        if expired:
            logger.debug("rate limiter sweep: policy={} removed={}", self._policy.name, len(expired))
        return len(expired)

    async def start(self) -> None:
        if self._sweeper is not None:
            return
        self._sweeper = asyncio.create_task(self._sweep_forever(), name=f"ratelimit-sweep-{self._policy.name}")

    async def stop(self) -> None:
        task, self._sweeper = self._sweeper, None
        if task is None:
            return
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)

    async def _sweep_forever(self) -> None:
        while True:
            await asyncio.sleep(self._cleanup_interval)
            try:
                self.cleanup()
            except Exception:
                logger.exception("rate limiter sweep failed: policy={}", self._policy.name)
