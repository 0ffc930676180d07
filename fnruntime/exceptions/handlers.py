"""Status resolution for errors that end an invocation."""

from http import HTTPStatus

from fnruntime.exceptions.base import FunctionRuntimeError
from fnruntime.exceptions.invocation_errors import HandlerError

_MIN_STATUS = 100
_MAX_STATUS = 599


def is_http_status(value: object) -> bool:
    """Check that a value is an integer status code in 100..599."""
    return isinstance(value, int) and not isinstance(value, bool) and _MIN_STATUS <= value <= _MAX_STATUS


def get_status_code_for_error(error: BaseException) -> int:
    """Resolve the response status an error encodes.

    An integer ``status_code`` attribute on the error wins, then the
    ``http_status`` of runtime errors. Handler errors resolve through the
    exception the handler raised.

    Args:
        error: The error that ended the invocation.

    Returns:
        HTTP status code, 500 when the error encodes none.
    """
    if isinstance(error, HandlerError) and error.cause is not None:
        return get_status_code_for_error(error.cause)

    status_code = getattr(error, "status_code", None)
    if is_http_status(status_code):
        return int(status_code)

    if isinstance(error, FunctionRuntimeError):
        return int(error.http_status)

    return int(HTTPStatus.INTERNAL_SERVER_ERROR)


def get_http_status_for_error_code(error_code: str) -> int:
    """Get HTTP status code for an error code.

    Args:
        error_code: The error code to look up.

    Returns:
        HTTP status code, or 500 if not found.
    """
    exception_class = FunctionRuntimeError.get_by_error_code(error_code)
    if exception_class is not None:
        return int(exception_class.http_status)
    return int(HTTPStatus.INTERNAL_SERVER_ERROR)


def describe_error(error: BaseException) -> str:
    """Return the text a response body carries for an error.

    Runtime errors contribute their message only; their context is for logs.
    """
    if isinstance(error, FunctionRuntimeError):
        return error.message or error.error_code
    return str(error) or type(error).__name__
