"""Base exception class for the function runtime.

Subclasses declaring their own ``error_code`` are registered, so a code
seen in a log line can be mapped back to the class that raised it.
"""

from http import HTTPStatus
from typing import Any, ClassVar


class FunctionRuntimeError(Exception):
    """Base of every error the runtime raises on its own behalf.

    Exceptions raised by handler code reach the host wrapped in
    ``HandlerError``; the message is what ends up in a response body, while
    ``context`` only goes to the logs.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        http_status: Status used when the error becomes a response.
        context: Additional debugging information.
    """

    error_code: ClassVar[str] = "RUNTIME_ERROR"
    http_status: ClassVar[int] = HTTPStatus.INTERNAL_SERVER_ERROR

    _registry: ClassVar[dict[str, type["FunctionRuntimeError"]]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        # subclasses reusing a parent's code must not shadow the parent
        if "error_code" in vars(cls):
            cls._registry[cls.error_code] = cls

    def __init__(self, message: str, *, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    @classmethod
    def get_by_error_code(cls, error_code: str) -> type["FunctionRuntimeError"] | None:
        """Look up the class registered for an error code, if any."""
        return cls._registry.get(error_code)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "context": self.context,
        }

    def to_log_dict(self) -> dict[str, Any]:
        """Convert to the fields attached to a structured log line."""
        return {
            **self.to_dict(),
            "http_status": int(self.http_status),
            "exception_type": type(self).__name__,
        }

    def __str__(self) -> str:
        if self.context:
            return f"{self.message} (context: {self.context})"
        return self.message

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, "
            f"error_code={self.error_code!r}, context={self.context!r})"
        )
