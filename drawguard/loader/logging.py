import inspect
import logging
import sys
from typing import Optional

from loguru import logger

from drawguard.config.settings import AppSettings, get_settings


CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

# stdlib loggers we route into loguru at the app's level
STDLIB_LOGGERS = ("aiohttp.access", "aiohttp.server", "aiohttp.web", "asyncio")


class InterceptHandler(logging.Handler):
    """Forward stdlib records (aiohttp, asyncio) to loguru, keeping the caller's location."""

    def emit(self, record: logging.LogRecord) -> None:
        level: str | int
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # skip this frame and the ones that belong to the logging module itself
        frame, depth = inspect.currentframe(), 0
        while frame is not None and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(settings: Optional[AppSettings] = None) -> None:
    settings = settings or get_settings()
    level = settings.log_level.upper()

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in STDLIB_LOGGERS:
        stdlib_logger = logging.getLogger(name)
        stdlib_logger.handlers = []
        stdlib_logger.propagate = True
        stdlib_logger.setLevel(level)

    logger.remove()
    if settings.log_json:
        logger.add(sys.stdout, level=level, serialize=True, backtrace=False, diagnose=False)
    else:
        logger.add(
            sys.stdout,
            level=level,
            format=CONSOLE_FORMAT,
            colorize=None,
            backtrace=True,
            diagnose=settings.debug,
        )

    logger.info("Logging configured: level={} json={}", level, settings.log_json)
