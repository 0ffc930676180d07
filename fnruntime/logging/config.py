"""Process logging settings, read from the worker's environment."""

from enum import StrEnum
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogLevel(StrEnum):
    """Levels accepted for the process loggers."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(StrEnum):
    """Output formats of the process log stream."""

    JSON = "json"
    HUMAN = "human"


_LEVEL_ALIASES = {"WARN": "WARNING", "FATAL": "CRITICAL"}


class LoggingConfig(BaseSettings):
    """Process logging settings.

    The runtime's own loggers and the logger receiving forwarded handler
    records have separate thresholds, so a worker can keep handler output
    while silencing the runtime, or the other way round.

    Attributes:
        log_level: Threshold of the root logger.
        handler_log_level: Threshold of the forwarded handler records.
        log_format: json for log shipping, human for local runs.
        use_colors: Whether the human format colors the level.
        service_name: Service identifier for log aggregation.
        include_timestamp: Whether JSON lines carry a timestamp.
        include_location: Whether JSON lines carry module/function/line.
        quiet_loggers: Library loggers held at WARNING whatever ``log_level`` says.
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        extra="ignore",
    )

    log_level: LogLevel = Field(default=LogLevel.INFO)
    handler_log_level: LogLevel = Field(default=LogLevel.DEBUG)
    log_format: LogFormat = Field(default=LogFormat.JSON)
    use_colors: bool = Field(default=True)
    service_name: str = Field(default="fnruntime")
    include_timestamp: bool = Field(default=True)
    include_location: bool = Field(default=True)
    quiet_loggers: list[str] = Field(default_factory=lambda: ["asyncio"])

    @field_validator("log_level", "handler_log_level", mode="before")
    @classmethod
    def normalize_level(cls, value: object) -> object:
        """Accept any casing, plus WARN and FATAL as aliases."""
        if isinstance(value, str):
            upper_value = value.strip().upper()
            return _LEVEL_ALIASES.get(upper_value, upper_value)
        return value


@lru_cache
def get_logging_config() -> LoggingConfig:
    """Get cached logging configuration instance."""
    return LoggingConfig()
