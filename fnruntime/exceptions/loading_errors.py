"""Errors raised while loading a handler and initializing its context."""

from typing import Any, ClassVar

from fnruntime.exceptions.base import FunctionRuntimeError


class LoadError(FunctionRuntimeError):
    """Base class for handler loading failures."""

    error_code: ClassVar[str] = "LOAD_ERROR"

    def __init__(
        self,
        message: str,
        *,
        handler: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize load error.

        Args:
            message: Description of the failure.
            handler: The handler spec being loaded.
            context: Additional context information.
        """
        context_dict = context or {}
        if handler is not None:
            context_dict["handler"] = handler
        super().__init__(message, context=context_dict)


class MalformedHandlerError(LoadError):
    """Handler spec is not in the ``module.sub:entrypoint`` form."""

    error_code: ClassVar[str] = "MALFORMED_HANDLER"


class HandlerNotFoundError(LoadError):
    """Handler module or entrypoint does not exist."""

    error_code: ClassVar[str] = "HANDLER_NOT_FOUND"


class InitContextError(LoadError):
    """The handler module's init_context raised."""

    error_code: ClassVar[str] = "INIT_CONTEXT_FAILED"
