"""Loading handlers from ``module.sub:entrypoint`` specs."""

import importlib
import sys
from collections.abc import Callable
from typing import Any

from fnruntime.config import HANDLER_PATTERN
from fnruntime.exceptions.loading_errors import HandlerNotFoundError, MalformedHandlerError
from fnruntime.types import Handler

INIT_CONTEXT_NAME = "init_context"


def load_handler(handler: str) -> Handler:
    """Import a handler's module and return its entrypoint.

    Args:
        handler: Spec in the form ``package.module:entrypoint``.

    Returns:
        The entrypoint callable.

    Raises:
        MalformedHandlerError: If the spec is malformed.
        HandlerNotFoundError: If the module or entrypoint does not exist.
    """
    match = HANDLER_PATTERN.match(handler)
    if not match:
        raise MalformedHandlerError(f"Malformed handler - {handler!r}", handler=handler)

    module_name, entrypoint_name = match.group(1), match.group(3)

    try:
        module = importlib.import_module(module_name)
    except ImportError as error:
        raise HandlerNotFoundError(
            f"Handler module {module_name!r} could not be imported: {error}",
            handler=handler,
        ) from error

    entrypoint = getattr(module, entrypoint_name, None)
    if not callable(entrypoint):
        raise HandlerNotFoundError(
            f"Handler {entrypoint_name!r} not found in module {module_name!r}",
            handler=handler,
        )

    return entrypoint


def find_init_context(handler: Handler) -> Callable[[Any], object] | None:
    """Return the ``init_context`` hook of the handler's module, if any."""
    module = sys.modules.get(getattr(handler, "__module__", "") or "")
    hook = getattr(module, INIT_CONTEXT_NAME, None)
    return hook if callable(hook) else None
