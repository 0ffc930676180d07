"""Process logger setup and logger factory."""

import logging
import sys
from dataclasses import dataclass, field
from typing import TextIO

from fnruntime.logging.config import LogFormat, LoggingConfig, get_logging_config
from fnruntime.logging.formatters import HANDLER_LOGGER_NAME, HumanFormatter, JSONFormatter


@dataclass
class LoggingState:
    """Whether the root logger was set up, and with what."""

    configured: bool = field(default=False)
    config: LoggingConfig | None = field(default=None)


_state = LoggingState()


def _build_handler(config: LoggingConfig, stream: TextIO | None) -> logging.Handler:
    handler = logging.StreamHandler(stream or sys.stdout)
    if config.log_format == LogFormat.HUMAN:
        handler.setFormatter(HumanFormatter(use_colors=config.use_colors))
    else:
        handler.setFormatter(
            JSONFormatter(
                service_name=config.service_name,
                include_timestamp=config.include_timestamp,
                include_location=config.include_location,
            )
        )
    return handler


def setup_logging(
    config: LoggingConfig | None = None,
    stream: TextIO | None = None,
    *,
    force: bool = False,
) -> None:
    """Route all process logging through one stream handler on the root logger.

    Forwarded handler records get their own threshold from
    ``handler_log_level``, applied on the ``fnruntime.handler`` logger.

    Args:
        config: Optional LoggingConfig instance. Loads from environment if not provided.
        stream: Output stream for logs. Defaults to sys.stdout.
        force: If True, reconfigure even if already configured.
    """
    if _state.configured and not force:
        return

    config = config or get_logging_config()

    root_logger = logging.getLogger()
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(_build_handler(config, stream))
    root_logger.setLevel(config.log_level.value)

    logging.getLogger(HANDLER_LOGGER_NAME).setLevel(config.handler_log_level.value)
    for name in config.quiet_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)

    _state.configured = True
    _state.config = config


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the given name.

    Args:
        name: Logger name, typically __name__ of the calling module.

    Returns:
        A logger instance.
    """
    return logging.getLogger(name)


def reset_logging() -> None:
    """Undo ``setup_logging``. Primarily for testing."""
    root_logger = logging.getLogger()
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.setLevel(logging.WARNING)

    if _state.config is not None:
        logging.getLogger(HANDLER_LOGGER_NAME).setLevel(logging.NOTSET)
        for name in _state.config.quiet_loggers:
            logging.getLogger(name).setLevel(logging.NOTSET)

    _state.configured = False
    _state.config = None
    get_logging_config.cache_clear()
