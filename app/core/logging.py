"""
Logging Setup - Best Outgoing Student Award Portal
app/core/logging.py

Configures stdlib logging and structlog from LOG_LEVEL / LOG_FORMAT.
"""

import logging
import sys
from typing import Optional

import structlog

from app.config import get_settings


def configure_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """Call once at startup (API or script)."""
    settings = get_settings()
    level_name = (level or settings.LOG_LEVEL).upper()
    fmt = fmt or settings.LOG_FORMAT
    log_level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if fmt == "json"
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
