"""Context variables for invocation-scoped logging data.

Each invocation runs with its own copy of these values, so concurrent
invocations on threads or tasks never see each other's identifiers.
"""

from contextvars import ContextVar
from typing import Any

invocation_id: ContextVar[str] = ContextVar("invocation_id", default="")

_extra_context: ContextVar[dict[str, Any] | None] = ContextVar("extra_context", default=None)


def get_invocation_id() -> str:
    """Get the identifier of the invocation being served.

    Returns:
        The invocation ID, or an empty string outside an invocation.
    """
    return invocation_id.get()


def set_invocation_id(value: str) -> None:
    """Set the invocation ID for the current context.

    Args:
        value: The invocation ID, usually the event ID.
    """
    invocation_id.set(value)


def get_extra_context() -> dict[str, Any]:
    """Get the current extra context.

    Returns:
        Copy of the extra context fields.
    """
    context = _extra_context.get()
    if context is None:
        return {}
    return context.copy()


def set_extra_context(**kwargs: Any) -> None:
    """Add fields to include in every process log message.

    Empty values are skipped so unset worker or trigger details do not
    clutter the output.

    Args:
        **kwargs: Key-value pairs to include in log messages.
    """
    current = _extra_context.get()
    current = {} if current is None else current.copy()
    current.update({key: value for key, value in kwargs.items() if value not in (None, "")})
    _extra_context.set(current)


def clear_context() -> None:
    """Clear the invocation ID and extra context."""
    invocation_id.set("")
    _extra_context.set(None)
