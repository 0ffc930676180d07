"""Tests for handler loading errors."""

from fnruntime.exceptions.loading_errors import (
    HandlerNotFoundError,
    InitContextError,
    LoadError,
    MalformedHandlerError,
)


class TestLoadError:
    def test_handler_in_context(self):
        error = LoadError("failed", handler="reverser:handler")
        assert error.context["handler"] == "reverser:handler"

    def test_no_handler(self):
        assert LoadError("failed").context == {}

    def test_merges_context(self):
        error = LoadError("failed", handler="a:b", context={"attempt": 2})
        assert error.context == {"attempt": 2, "handler": "a:b"}


class TestSubclasses:
    def test_error_codes(self):
        assert MalformedHandlerError.error_code == "MALFORMED_HANDLER"
        assert HandlerNotFoundError.error_code == "HANDLER_NOT_FOUND"
        assert InitContextError.error_code == "INIT_CONTEXT_FAILED"

    def test_inherit_from_load_error(self):
        for error_class in (MalformedHandlerError, HandlerNotFoundError, InitContextError):
            assert issubclass(error_class, LoadError)
