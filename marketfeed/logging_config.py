"""
Structured logging setup.

All modules log through ``structlog.get_logger(__name__)`` with snake_case
event names and key/value context. ``setup_logging`` wires structlog onto the
standard library logging module once, at process start.
"""

import logging
import sys

import structlog

from marketfeed.config.models import LogFormat, LogLevel


def setup_logging(
    level: LogLevel | str = LogLevel.INFO,
    log_format: LogFormat | str = LogFormat.JSON,
) -> None:
    """
    Configure structlog and standard logging.

    Args:
        level: Minimum log level.
        log_format: "json" for machine-readable lines, "text" for console output.
    """
    level_name = LogLevel(str(getattr(level, "value", level)).upper()).value
    renderer = (
        structlog.processors.JSONRenderer()
        if LogFormat(log_format) is LogFormat.JSON
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level_name),
        force=True,
    )

    # aiohttp logs every connection at DEBUG
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
