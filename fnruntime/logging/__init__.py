"""Structured logging for the function runtime process.

Usage:
    from fnruntime.logging import setup_logging, get_logger

    setup_logging()
    logger = get_logger(__name__)
    logger.info("Worker ready", extra={"handler": "reverser:handler"})
"""

from fnruntime.logging.config import LogFormat, LoggingConfig, LogLevel
from fnruntime.logging.context import (
    clear_context,
    get_extra_context,
    get_invocation_id,
    invocation_id,
    set_extra_context,
    set_invocation_id,
)
from fnruntime.logging.formatters import HumanFormatter, JSONFormatter
from fnruntime.logging.logger import get_logger, reset_logging, setup_logging

__all__ = [
    "HumanFormatter",
    "JSONFormatter",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "clear_context",
    "get_extra_context",
    "get_invocation_id",
    "get_logger",
    "invocation_id",
    "reset_logging",
    "set_extra_context",
    "set_invocation_id",
    "setup_logging",
]
