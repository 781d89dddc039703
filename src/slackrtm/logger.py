"""Structured logging for slackrtm.

Importing this module never touches global logging state. Applications that
want the console setup call ``setup_logging()`` once at startup.
"""

from __future__ import annotations

import logging
import sys

import structlog

logger: structlog.stdlib.BoundLogger = structlog.get_logger("slackrtm")


def setup_logging(level: str | None = None) -> None:
    """Configure stdlib logging and structlog for console output.

    ``level`` defaults to ``Settings.logging.level`` (``LOGGING__LEVEL`` env).
    """
    if level is None:
        from slackrtm.config import get_settings

        level = get_settings().logging.level
    numeric = getattr(logging, level.upper(), logging.INFO)

    # Configure stdlib root logger first so structlog's filter_by_level works
    logging.basicConfig(level=numeric, format="%(message)s", stream=sys.stderr)
    logging.getLogger().setLevel(numeric)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
