"""Errors raised while serving a single invocation."""

from http import HTTPStatus
from typing import Any, ClassVar

from fnruntime.exceptions.base import FunctionRuntimeError


class InvocationError(FunctionRuntimeError):
    """Base class for errors tied to one invocation."""

    error_code: ClassVar[str] = "INVOCATION_ERROR"
    http_status: ClassVar[int] = HTTPStatus.INTERNAL_SERVER_ERROR


class HandlerError(InvocationError):
    """User handler code raised an exception.

    The original exception is kept as ``cause``; the message is its string
    form so the response body reads exactly what the handler raised.
    """

    error_code: ClassVar[str] = "HANDLER_ERROR"
    http_status: ClassVar[int] = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        *,
        cause: BaseException | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize handler error.

        Args:
            message: Description of the failure.
            cause: The exception raised by the handler.
            context: Additional context information.
        """
        super().__init__(message, context=context)
        self.cause = cause

    @classmethod
    def from_exception(cls, error: BaseException) -> "HandlerError":
        """Wrap an exception raised by handler code."""
        if isinstance(error, HandlerError):
            return error
        try:
            message = str(error)
        except Exception:
            message = ""
        return cls(message or type(error).__name__, cause=error)

    def to_log_dict(self) -> dict[str, Any]:
        """Include the handler's exception type in the log fields."""
        fields = super().to_log_dict()
        if self.cause is not None:
            fields["cause_type"] = type(self.cause).__name__
        return fields


class DoubleResponseError(InvocationError):
    """The handler delivered a result more than once.

    ``log_records`` is filled by the invoker with the records drained from
    the failed invocation, so the host can still ship them.
    """

    error_code: ClassVar[str] = "DOUBLE_RESPONSE"
    http_status: ClassVar[int] = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str = "Result already delivered for this invocation",
        *,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, context=context)
        self.log_records: list[Any] = []


class MalformedResultError(InvocationError):
    """A returned or delivered value matches no supported result shape."""

    error_code: ClassVar[str] = "MALFORMED_RESULT"
    http_status: ClassVar[int] = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        *,
        result_type: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize malformed result error.

        Args:
            message: Description of what is wrong with the result.
            result_type: Type name of the offending value.
            context: Additional context information.
        """
        context_dict = context or {}
        if result_type is not None:
            context_dict["result_type"] = result_type
        super().__init__(message, context=context_dict)


class EventLoopRunningError(InvocationError):
    """A coroutine handler was invoked synchronously from a running event loop.

    The host should call ``Invoker.invoke_async`` instead.
    """

    error_code: ClassVar[str] = "EVENT_LOOP_RUNNING"
    http_status: ClassVar[int] = HTTPStatus.INTERNAL_SERVER_ERROR
