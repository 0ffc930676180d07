"""Tests for runtime configuration."""

import pytest
from pydantic import ValidationError

from fnruntime.config import HANDLER_PATTERN, Settings, get_settings, validate_startup_config


class TestSettingsDefaults:
    def test_default_service_name(self):
        assert Settings().service_name == "fnruntime"

    def test_default_handler_empty(self):
        assert Settings().handler == ""

    def test_records_every_handler_level_by_default(self):
        assert Settings().min_handler_log_level == "debug"

    def test_default_max_log_records(self):
        assert Settings().max_log_records == 10_000

    def test_forwards_handler_logs_by_default(self):
        assert Settings().forward_handler_logs is True

    def test_traceback_excluded_from_error_body_by_default(self):
        assert Settings().include_traceback_in_error_body is False


class TestSettingsFromEnvironment:
    def test_reads_handler(self, monkeypatch):
        monkeypatch.setenv("HANDLER", "functions.reverser:handler")
        assert Settings().handler == "functions.reverser:handler"

    def test_reads_worker_identity(self, monkeypatch):
        monkeypatch.setenv("WORKER_ID", "3")
        monkeypatch.setenv("TRIGGER_KIND", "http")
        monkeypatch.setenv("TRIGGER_NAME", "default-http")
        settings = Settings()
        assert settings.worker_id == "3"
        assert settings.trigger_kind == "http"
        assert settings.trigger_name == "default-http"

    def test_strips_whitespace(self, monkeypatch):
        monkeypatch.setenv("SERVICE_NAME", "  outputter  ")
        assert Settings().service_name == "outputter"

    def test_reads_boolean_flags(self, monkeypatch):
        monkeypatch.setenv("FORWARD_HANDLER_LOGS", "false")
        monkeypatch.setenv("INCLUDE_TRACEBACK_IN_ERROR_BODY", "true")
        settings = Settings()
        assert settings.forward_handler_logs is False
        assert settings.include_traceback_in_error_body is True

    def test_reads_min_handler_log_level(self, monkeypatch):
        monkeypatch.setenv("MIN_HANDLER_LOG_LEVEL", "WARN")
        assert Settings().min_handler_log_level == "warn"


class TestSettingsValidation:
    def test_warning_alias(self):
        assert Settings(min_handler_log_level="warning").min_handler_log_level == "warn"

    def test_invalid_min_handler_log_level(self):
        with pytest.raises(ValidationError):
            Settings(min_handler_log_level="critical")

    def test_invalid_handler(self):
        with pytest.raises(ValidationError):
            Settings(handler="no-entrypoint")

    def test_handler_with_package_path(self):
        assert Settings(handler="a.b.c:main").handler == "a.b.c:main"

    def test_handler_with_dashed_module(self):
        assert Settings(handler="my-function.main:handler").handler == "my-function.main:handler"

    def test_max_log_records_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(max_log_records=0)


class TestHandlerPattern:
    def test_groups(self):
        match = HANDLER_PATTERN.match("pkg.mod:entry")
        assert match.group(1) == "pkg.mod"
        assert match.group(3) == "entry"

    def test_entrypoint_required(self):
        assert HANDLER_PATTERN.match("pkg.mod:") is None


class TestGetSettings:
    def test_cached(self):
        assert get_settings() is get_settings()

    def test_validate_startup_config(self):
        assert isinstance(validate_startup_config(), Settings)

    def test_validate_startup_config_rejects_bad_environment(self, monkeypatch):
        monkeypatch.setenv("MAX_LOG_RECORDS", "0")
        with pytest.raises(ValidationError):
            validate_startup_config()
