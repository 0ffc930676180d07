"""Runtime configuration using Pydantic BaseSettings.

All settings come from the environment the host injects into each worker;
there are no .env files.

Usage:
    from fnruntime.config import get_settings

    settings = get_settings()
    print(settings.handler)
    print(settings.max_log_records)
"""

import re
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# package.module:entrypoint, module parts may contain dashes
HANDLER_PATTERN = re.compile(r"^([\w|-]+(\.[\w|-]+)*):(\w+)$")

_HANDLER_LOG_LEVELS = frozenset({"debug", "info", "warn", "error"})


class Settings(BaseSettings):
    """Settings of one worker.

    Attributes:
        service_name: Name of this service for logging.
        handler: Entrypoint in the form ``package.module:entrypoint``.
        min_handler_log_level: Lowest handler log level recorded when an
            invocation does not ask for one.
        worker_id: Identifier of the worker serving invocations.
        trigger_kind: Kind of trigger feeding events (http, cron, ...).
        trigger_name: Name of the trigger feeding events.
        max_log_records: Capacity of the per-invocation log sink.
        forward_handler_logs: Whether drained handler logs go to the process logger.
        include_traceback_in_error_body: Whether 500 bodies carry the traceback.
    """

    model_config = SettingsConfigDict(
        env_file=None,
        case_sensitive=False,
        extra="ignore",
        str_strip_whitespace=True,
    )

    service_name: str = Field(default="fnruntime", min_length=1)
    handler: str = Field(default="", description="package.module:entrypoint")

    # Worker identity
    worker_id: str = Field(default="")
    trigger_kind: str = Field(default="")
    trigger_name: str = Field(default="")

    # Per-invocation behavior
    min_handler_log_level: str = Field(default="debug")
    max_log_records: int = Field(default=10_000, ge=1, le=1_000_000)
    forward_handler_logs: bool = Field(default=True)
    include_traceback_in_error_body: bool = Field(default=False)

    @field_validator("min_handler_log_level")
    @classmethod
    def validate_min_handler_log_level(cls, value: str) -> str:
        """Lowercase the level and map ``warning`` to ``warn``."""
        lower_value = value.lower()
        if lower_value == "warning":
            lower_value = "warn"
        if lower_value not in _HANDLER_LOG_LEVELS:
            error_message = f"min_handler_log_level must be one of {sorted(_HANDLER_LOG_LEVELS)}, got '{value}'"
            raise ValueError(error_message)
        return lower_value

    @field_validator("handler")
    @classmethod
    def validate_handler(cls, value: str) -> str:
        """Validate the handler is empty or matches module:entrypoint."""
        if value and not HANDLER_PATTERN.match(value):
            error_message = f"handler must look like 'module.sub:entrypoint', got '{value}'"
            raise ValueError(error_message)
        return value


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def validate_startup_config() -> Settings:
    """Validate configuration on worker startup.

    Raises:
        pydantic.ValidationError: If configuration is invalid.
    """
    return get_settings()
