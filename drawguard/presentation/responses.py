from __future__ import annotations

from aiohttp import web

from drawguard.constants import (
    HEADER_LIMIT,
    HEADER_REMAINING,
    HEADER_RESET,
    HEADER_RETRY_AFTER,
    MSG_RATE_LIMITED,
    MSG_RATE_LIMITED_ERROR,
)
from drawguard.domain.errors import RateLimitExceeded
from drawguard.domain.models import Decision

from .app_keys import RATE_LIMIT_HEADERS_KEY


def rate_limit_headers(decision: Decision) -> dict[str, str]:
    return {
        HEADER_LIMIT: str(decision.limit),
        HEADER_REMAINING: str(decision.remaining),
        HEADER_RESET: decision.reset_iso(),
    }


def too_many_requests(exc: RateLimitExceeded) -> web.Response:
    headers = rate_limit_headers(exc.decision)
    headers[HEADER_RETRY_AFTER] = str(exc.retry_after)
    return web.json_response(
        {
            "error": MSG_RATE_LIMITED_ERROR,
            "retryAfter": exc.retry_after,
            "message": MSG_RATE_LIMITED,
        },
        status=429,
        headers=headers,
    )


async def attach_rate_limit_headers(request: web.Request, response: web.StreamResponse) -> None:
    headers = request.get(RATE_LIMIT_HEADERS_KEY)
    if headers:
        response.headers.update(headers)
