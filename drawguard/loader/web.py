from typing import Optional

from aiohttp import web
from loguru import logger
from redis.asyncio import Redis

from drawguard.config.settings import AppSettings
from drawguard.presentation.app_keys import LIMITERS_KEY, REDIS_KEY, SETTINGS_KEY
from drawguard.presentation.middlewares import logging_middleware
from drawguard.presentation.responses import attach_rate_limit_headers
from drawguard.presentation.routes import routes
from drawguard.services.limiters import LimiterRegistry


async def on_startup(app: web.Application):
    await app[LIMITERS_KEY].start()
    logger.info("Rate limiters started")


async def on_cleanup(app: web.Application):
    await app[LIMITERS_KEY].stop()
    logger.info("Rate limiters stopped")
    redis = app[REDIS_KEY]
    if redis is not None:
        await redis.aclose()
        logger.info("Redis connection closed")


def create_web_app(
    settings: AppSettings,
    limiters: LimiterRegistry,
    redis: Optional[Redis] = None,
) -> web.Application:
    app = web.Application(middlewares=[logging_middleware])

    app[SETTINGS_KEY] = settings
    app[LIMITERS_KEY] = limiters
    app[REDIS_KEY] = redis

    app.router.add_routes(routes)

    app.on_response_prepare.append(attach_rate_limit_headers)
    app.on_startup.append(on_startup)
    app.on_cleanup.append(on_cleanup)

    return app
