import asyncio
import sys

from aiohttp import web
from loguru import logger

from drawguard.main_app import create_app
from drawguard.config.settings import get_settings
from drawguard.loader.logging import setup_logging


def install_event_loop() -> bool:
    """Use uvloop where it exists (it is not built for Windows)."""
    if sys.platform == "win32":
        return False
    import uvloop

    uvloop.install()
    return True


def main():
    install_event_loop()
    setup_logging()
    settings = get_settings()

    logger.info("Starting app on {}:{}", settings.webapp_host, settings.webapp_port)

    async def _run():
        app = await create_app()
        runner = web.AppRunner(app)
        await runner.setup()
        site = web.TCPSite(runner, host=settings.webapp_host, port=settings.webapp_port)
        await site.start()
        logger.info("App started")
        try:
            # Block forever; cancellation (Ctrl+C) falls through to cleanup
            while True:
                await asyncio.sleep(3600)
        finally:
            await runner.cleanup()
            logger.info("App stopped")

    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
