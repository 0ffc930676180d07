"""Function runtime exception hierarchy.

Architecture:
    FunctionRuntimeError (base)
    ├── InvocationError
    │   ├── HandlerError (500, or the status the handler's error encodes)
    │   ├── DoubleResponseError
    │   ├── EventLoopRunningError
    │   └── MalformedResultError
    └── LoadError
        ├── MalformedHandlerError
        ├── HandlerNotFoundError
        └── InitContextError

Usage:
    from fnruntime.exceptions import DoubleResponseError

    def deliver_result(self, value):
        if self._delivered:
            raise DoubleResponseError()
"""

from fnruntime.exceptions.base import FunctionRuntimeError
from fnruntime.exceptions.handlers import (
    describe_error,
    get_http_status_for_error_code,
    get_status_code_for_error,
    is_http_status,
)
from fnruntime.exceptions.invocation_errors import (
    DoubleResponseError,
    EventLoopRunningError,
    HandlerError,
    InvocationError,
    MalformedResultError,
)
from fnruntime.exceptions.loading_errors import (
    HandlerNotFoundError,
    InitContextError,
    LoadError,
    MalformedHandlerError,
)

__all__ = [
    "DoubleResponseError",
    "EventLoopRunningError",
    "FunctionRuntimeError",
    "HandlerError",
    "HandlerNotFoundError",
    "InitContextError",
    "InvocationError",
    "LoadError",
    "MalformedHandlerError",
    "MalformedResultError",
    "describe_error",
    "get_http_status_for_error_code",
    "get_status_code_for_error",
    "is_http_status",
]
