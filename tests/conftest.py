"""Shared test fixtures."""

import pytest

from fnruntime.config import get_settings
from fnruntime.logging.context import clear_context


@pytest.fixture(autouse=True)
def _clear_environment(monkeypatch):
    """Clear environment variables that affect settings."""
    env_vars_to_clear = [
        "SERVICE_NAME",
        "HANDLER",
        "MIN_HANDLER_LOG_LEVEL",
        "LOG_LEVEL",
        "LOG_FORMAT",
        "HANDLER_LOG_LEVEL",
        "USE_COLORS",
        "QUIET_LOGGERS",
        "INCLUDE_TIMESTAMP",
        "INCLUDE_LOCATION",
        "WORKER_ID",
        "TRIGGER_KIND",
        "TRIGGER_NAME",
        "MAX_LOG_RECORDS",
        "FORWARD_HANDLER_LOGS",
        "INCLUDE_TRACEBACK_IN_ERROR_BODY",
    ]
    for var in env_vars_to_clear:
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    clear_context()
