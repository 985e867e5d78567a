from aiohttp import web

from drawguard.config.settings import get_settings
from drawguard.loader.redis import init_redis
from drawguard.loader.web import create_web_app
from drawguard.services.limiters import build_limiters


async def create_app() -> web.Application:
    settings = get_settings()
    redis = await init_redis(settings)
    limiters = build_limiters(settings, redis)
    app = create_web_app(settings, limiters, redis)
    return app
