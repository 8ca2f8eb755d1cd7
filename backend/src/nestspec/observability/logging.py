"""Structured logging configuration."""

from __future__ import annotations

import logging
from typing import Optional

import structlog

from nestspec.config import get_settings

_logging_configured = False


def configure_logging_once(log_level: Optional[str] = None) -> None:
    """Configure structlog-backed logging in an idempotent way."""

    global _logging_configured
    if _logging_configured:
        return

    level_name = (log_level or get_settings().log_level).upper()
    level = getattr(logging, level_name, logging.WARNING)

    structlog.reset_defaults()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=False,
    )

    # Route stdlib logging through structlog
    logging.basicConfig(level=level, format="%(message)s")

    _logging_configured = True


def get_logger(name: str = "nestspec"):
    """Return a structlog logger bound to ``name``."""

    return structlog.get_logger(name)
