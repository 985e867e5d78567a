from __future__ import annotations

from typing import Awaitable, Iterator, Optional, Protocol, Union

from loguru import logger
from redis.asyncio import Redis

from drawguard.config.settings import AppSettings
from drawguard.domain.errors import PolicyError, UnknownPolicyError
from drawguard.domain.models import Decision
from drawguard.domain.policies import Policy
from drawguard.infrastructure.rate_limiter import RateLimiter
from drawguard.infrastructure.redis_rate_limiter import RedisRateLimiter


# Port for presentation (so presentation DOES NOT depend on a concrete backend)
class RateLimiterPort(Protocol):
    @property
    def policy(self) -> Policy: ...
    def now(self) -> int: ...
    def check(self, identifier: str) -> Union[Decision, Awaitable[Decision]]: ...
    async def start(self) -> None: ...
    async def stop(self) -> None: ...


def _key(name: object) -> str:
    # accepts PolicyName members as well as plain strings
    return str(getattr(name, "value", name))


class LimiterRegistry:
    """
    One limiter per policy name. Each limiter keeps its own state, so
    exhausting one policy never affects another.
    """

    def __init__(self) -> None:
        self._limiters: dict[str, RateLimiterPort] = {}
        self._started: list[str] = []

    def register(self, limiter: RateLimiterPort) -> None:
        name = limiter.policy.name
        if name in self._limiters:
            raise PolicyError(f"Limiter already registered: {name}")
        self._limiters[name] = limiter

    def get(self, name: str) -> RateLimiterPort:
        try:
            return self._limiters[_key(name)]
        except KeyError as exc:
            raise UnknownPolicyError(f"Unknown rate limit policy: {name}") from exc

    def __contains__(self, name: object) -> bool:
        return _key(name) in self._limiters

    def __iter__(self) -> Iterator[RateLimiterPort]:
        return iter(self._limiters.values())

    def __len__(self) -> int:
        return len(self._limiters)

    async def start(self) -> None:
        for name, limiter in self._limiters.items():
            if name in self._started:
                continue
            logger.info("limiter.start: {}", name)
            await limiter.start()
            self._started.append(name)

    async def stop(self) -> None:
        for name in reversed(self._started):
            logger.info("limiter.stop: {}", name)
            try:
                await self._limiters[name].stop()
            except Exception:
                logger.exception("limiter.stop failed: {}", name)
        self._started.clear()


def build_limiters(settings: AppSettings, redis: Optional[Redis] = None) -> LimiterRegistry:
    registry = LimiterRegistry()
    use_redis = settings.rate_limit_backend == "redis"
    if use_redis and redis is None:
        logger.warning("RATE_LIMIT_BACKEND=redis but Redis is unavailable, using in-memory limiters")
        use_redis = False

    for policy in settings.policies():
        limiter: RateLimiterPort
        if use_redis:
            limiter = RedisRateLimiter(policy, redis=redis)
        else:
            limiter = RateLimiter(policy, cleanup_interval_sec=settings.cleanup_interval_sec)
        registry.register(limiter)

    logger.info(
        "Rate limiters ready: backend={} policies={}",
        "redis" if use_redis else "memory",
        ", ".join(f"{p.name}={p.max_requests}/{p.window_ms}ms" for p in settings.policies()),
    )
    return registry
