"""Type definitions shared by the host glue and the logging adapters."""

from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any, Protocol


class TriggerLike(Protocol):
    """Trigger that produced an event."""

    kind: str
    name: str


class EventLike(Protocol):
    """Inbound event interface needed for log context binding."""

    id: str
    trigger: TriggerLike


class ContextLike(Protocol):
    """Invocation context interface needed for log context binding."""

    worker_id: str
    trigger: TriggerLike


class HandlerLogRecordLike(Protocol):
    """A log record emitted by handler code through its context."""

    level: str
    message: str
    attributes: Mapping[str, Any]
    timestamp: datetime


# Handlers are called as handler(context, event) and may return anything
Handler = Callable[[Any, Any], object]
