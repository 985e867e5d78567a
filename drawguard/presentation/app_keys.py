from __future__ import annotations

from typing import Optional

from aiohttp import web
from redis.asyncio import Redis

from drawguard.config.settings import AppSettings
from drawguard.services.limiters import LimiterRegistry


SETTINGS_KEY = web.AppKey("settings", AppSettings)
LIMITERS_KEY = web.AppKey("limiters", LimiterRegistry)
REDIS_KEY = web.AppKey("redis", Optional[Redis])

# per-request quota headers, applied when the response is prepared
RATE_LIMIT_HEADERS_KEY = "drawguard.ratelimit_headers"
