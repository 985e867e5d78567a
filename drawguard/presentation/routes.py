from __future__ import annotations

from aiohttp import web

from drawguard.domain.policies import PolicyName
from drawguard.infrastructure.rate_limiter import RateLimiter

from .app_keys import LIMITERS_KEY
from .decorators import with_rate_limit


routes = web.RouteTableDef()


@routes.get("/health")
async def health(request: web.Request) -> web.Response:
    return web.Response(text="ok")


@routes.get("/api/ratelimit/policies")
@with_rate_limit(PolicyName.GENERAL)
async def list_policies(request: web.Request) -> web.Response:
    registry = request.app[LIMITERS_KEY]
    return web.json_response({"policies": [limiter.policy.as_dict() for limiter in registry]})


@routes.get("/api/ratelimit/stats")
@with_rate_limit(PolicyName.GENERAL)
async def limiter_stats(request: web.Request) -> web.Response:
    registry = request.app[LIMITERS_KEY]
    stats = []
    for limiter in registry:
        # redis keys expire on their own, nothing to count locally
        in_memory = isinstance(limiter, RateLimiter)
        stats.append(
            {
                "policy": limiter.policy.name,
                "backend": "memory" if in_memory else "redis",
                "trackedClients": len(limiter) if in_memory else None,
            }
        )
    return web.json_response({"limiters": stats})
