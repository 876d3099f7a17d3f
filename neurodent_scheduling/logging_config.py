"""Structured logging configuration.

Purpose: JSON-formatted logs with per-attempt tracing for booking flows.

Pattern: structlog with standard library integration.
"""
import logging
import sys
import uuid
from typing import Optional

import structlog

from neurodent_scheduling import config


def setup_structured_logging(log_level: Optional[str] = None):
    """
    Configure structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR); default LOG_LEVEL
    """
    log_level = log_level or config.LOG_LEVEL
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper())
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get logger instance with structured logging.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


def generate_attempt_id() -> str:
    """Generate unique ID for one booking or reschedule attempt."""
    return f"att-{uuid.uuid4().hex[:12]}"
