from aiohttp import web
from loguru import logger


@web.middleware
async def logging_middleware(request: web.Request, handler) -> web.StreamResponse:
    logger.debug(f"Incoming request: {request.method} {request.path_qs}")
    try:
        response = await handler(request)
    except web.HTTPException as e:
        logger.debug(f"{request.method} {request.path} -> {e.status}")
        raise
    except Exception as e:
        logger.exception(f"Error while handling request {request.method} {request.path}: {e!r}")
        raise
    logger.debug(f"{request.method} {request.path} -> {response.status}")
    return response
