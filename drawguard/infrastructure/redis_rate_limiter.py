from __future__ import annotations

from redis.asyncio import Redis

from drawguard.domain.models import Decision
from drawguard.domain.policies import Policy

from .rate_limiter import Clock, epoch_ms


class RedisRateLimiter:
    """
    Fixed-window limiter shared by every process pointed at the same Redis.

    INCR + PEXPIRE NX + PTTL run in one MULTI/EXEC, so the first hit of a window
    sets its expiry and later hits only count. Redis expiry replaces the sweep.
    """

    def __init__(
        self,
        policy: Policy,
        *,
        redis: Redis,
        key_prefix: str = "ratelimit",
        clock: Clock = epoch_ms,
    ) -> None:
        self._policy = policy
        self._redis = redis
        self._prefix = key_prefix
        self._clock = clock

    @property
    def policy(self) -> Policy:
        return self._policy

    def now(self) -> int:
        return self._clock()

    def key_for(self, identifier: str) -> str:
        return f"{self._prefix}:{self._policy.name}:{identifier}"

    async def check(self, identifier: str) -> Decision:
        key = self.key_for(identifier)
        window = self._policy.window_ms
        limit = self._policy.max_requests

        async with self._redis.pipeline(transaction=True) as pipe:
            pipe.incr(key)
            pipe.pexpire(key, window, nx=True)
            pipe.pttl(key)
            count, _, ttl = await pipe.execute()

        now = self._clock()
        # -1/-2 only if the key lost its expiry or vanished between commands
        reset_time = now + (int(ttl) if int(ttl) > 0 else window)
        count = int(count)
        return Decision(
            allowed=count <= limit,
            limit=limit,
            remaining=max(0, limit - count),
            reset_time=reset_time,
        )

    async def start(self) -> None:
        return None

    async def stop(self) -> None:
        return None
