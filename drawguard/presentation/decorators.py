from __future__ import annotations

import functools
import inspect
from typing import Awaitable, Callable, Union

from aiohttp import web
from loguru import logger

from drawguard.domain.errors import RateLimitExceeded
from drawguard.domain.policies import PolicyName
from drawguard.infrastructure.client_identifier import derive_identifier
from drawguard.services.limiters import RateLimiterPort

from .app_keys import LIMITERS_KEY, RATE_LIMIT_HEADERS_KEY
from .responses import rate_limit_headers, too_many_requests


Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def with_rate_limit(limiter: Union[RateLimiterPort, PolicyName, str]) -> Callable[[Handler], Handler]:
    """
    Apply a limiter to an aiohttp handler.

    `limiter` is either a limiter instance or a policy name looked up in the
    app's registry on each request. Rejected calls get a 429 without reaching
    the handler; admitted calls get the quota headers added to the handler's
    response. Handler exceptions propagate untouched.
    """

    def decorator(handler: Handler) -> Handler:
        @functools.wraps(handler)
        async def wrapper(request: web.Request) -> web.StreamResponse:
            active = _resolve(request, limiter)
            identifier = derive_identifier(request.headers)

            decision = active.check(identifier)
            if inspect.isawaitable(decision):
                decision = await decision

            if not decision.allowed:
                exc = RateLimitExceeded(
                    policy=active.policy.name,
                    decision=decision,
                    retry_after=decision.retry_after(active.now()),
                )
                logger.debug("{} {} rejected: {}", request.method, request.path, exc)
                return too_many_requests(exc)

            headers = rate_limit_headers(decision)
            request[RATE_LIMIT_HEADERS_KEY] = headers
            try:
                response = await handler(request)
            except BaseException:
                request.pop(RATE_LIMIT_HEADERS_KEY, None)
                raise

            # streamed responses got theirs in on_response_prepare
            if not response.prepared:
                response.headers.update(headers)
            return response

        return wrapper

    return decorator


def _resolve(request: web.Request, limiter: Union[RateLimiterPort, PolicyName, str]) -> RateLimiterPort:
    if isinstance(limiter, str):
        return request.app[LIMITERS_KEY].get(limiter)
    return limiter
