"""
Loguru configuration for the application.

This module configures loguru with:
- The active adapter's platform label in each log
- Configurable format from settings
- Optional JSON serialization
- Redirection of standard library logs to loguru
"""

import logging
import sys
from typing import Any

from loguru import logger

from platform_services.config import settings
from platform_services.core.platform_context import platform_context


def add_platform(record: dict[str, Any]) -> bool:
    """
    Adds the platform label to the log record.

    The label is set by composite services around each adapter call,
    so logs emitted while talking to one backend name that backend.

    Args:
        record: Loguru record

    Returns:
        True to indicate that the filter passed
    """
    platform = platform_context.get()
    record["extra"]["platform"] = platform if platform else "-"
    return True


def configure_logger() -> None:
    """
    Replaces loguru's default handler with one stderr sink driven by settings.

    With ``LOG_SERIALIZE`` enabled each record is emitted as one JSON line
    (the platform label ends up under ``record.extra.platform``) and
    colors are turned off.
    """
    logger.remove()

    logger.add(
        sink=sys.stderr,
        level=settings.log_level.upper(),
        format=settings.log_format,
        filter=add_platform,
        colorize=not settings.log_serialize,
        serialize=settings.log_serialize,
        backtrace=True,
        diagnose=False,
        enqueue=settings.logger_enqueue,
    )


# Configure logger when importing the module
configure_logger()


__all__ = ["logger", "InterceptHandler", "intercept_standard_logging"]


class InterceptHandler(logging.Handler):
    """
    Handler to redirect standard logging logs to loguru.

    This allows capturing logs from libraries that use standard logging
    (like uvicorn, httpx, fastapi) and process them with loguru.
    """

    def emit(self, record: logging.LogRecord) -> None:
        """
        Redirects a standard logging record to loguru.

        Args:
            record: logging.LogRecord record
        """
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        logger.opt(depth=6, exception=record.exc_info).log(level, record.getMessage())


def intercept_standard_logging() -> None:
    """
    Configures redirection of standard logging to loguru.

    Call this once when the host application starts.
    """
    logging.basicConfig(handlers=[InterceptHandler()], level=logging.INFO)

    for logger_name in [
        "uvicorn",
        "uvicorn.access",
        "uvicorn.error",
        "httpx",
        "fastapi",
    ]:
        logging_logger = logging.getLogger(logger_name)
        logging_logger.handlers = [InterceptHandler()]
        logging_logger.propagate = False
