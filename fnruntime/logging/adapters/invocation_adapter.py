"""Adapter between invocations and the process logger."""

import logging
from collections.abc import Iterable

from fnruntime.logging.context import set_extra_context, set_invocation_id
from fnruntime.logging.formatters import HANDLER_LOGGER_NAME, HANDLER_TIMESTAMP_ATTRIBUTE, WITH_ATTRIBUTE
from fnruntime.types import ContextLike, EventLike, HandlerLogRecordLike

_HANDLER_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


def set_invocation_context(event: EventLike, context: ContextLike) -> None:
    """Set logging context from an event and its invocation context.

    Args:
        event: The event being served.
        context: The invocation context handed to the handler.
    """
    set_invocation_id(event.id)
    set_extra_context(
        worker_id=context.worker_id,
        trigger_kind=event.trigger.kind or context.trigger.kind,
        trigger_name=event.trigger.name or context.trigger.name,
    )


def emit_log_records(
    records: Iterable[HandlerLogRecordLike],
    logger: logging.Logger | None = None,
) -> int:
    """Forward drained handler records to the process logger, in order.

    Attributes travel under the ``with`` key and are not inspected.

    Args:
        records: Records drained from an invocation context.
        logger: Target logger. Defaults to the ``fnruntime.handler`` logger.

    Returns:
        Number of records forwarded.
    """
    target = logger or logging.getLogger(HANDLER_LOGGER_NAME)
    count = 0
    for record in records:
        level = _HANDLER_LEVELS.get(str(record.level), logging.INFO)
        target.log(
            level,
            record.message,
            extra={
                WITH_ATTRIBUTE: dict(record.attributes),
                HANDLER_TIMESTAMP_ATTRIBUTE: record.timestamp.isoformat(),
            },
        )
        count += 1
    return count
