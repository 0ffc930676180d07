"""Log formatters for runtime and forwarded handler records.

Both formatters read the invocation ID and extra fields from the logging
context. Records forwarded from handler code carry their attributes under
``with`` and the time the handler logged them under ``handler_timestamp``.
"""

import json
import logging
import traceback
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any, ClassVar

from fnruntime.logging.context import get_extra_context, get_invocation_id

HANDLER_LOGGER_NAME = "fnruntime.handler"
WITH_ATTRIBUTE = "with"
HANDLER_TIMESTAMP_ATTRIBUTE = "handler_timestamp"

# attributes every LogRecord has, never copied into the output
_RESERVED_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", logging.NOTSET, "", 0, "", None, None))
) | {"message", "asctime"}

_LOGGER_NAME_WIDTH = 30


def record_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Collect the context and ``extra`` fields of a record.

    Returns:
        Invocation ID first, then the extra context, then the record's own
        extras, later keys overriding earlier ones.
    """
    fields: dict[str, Any] = {}

    current_invocation_id = get_invocation_id()
    if current_invocation_id:
        fields["invocation_id"] = current_invocation_id

    fields.update(get_extra_context())
    fields.update(
        (key, value)
        for key, value in vars(record).items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    )
    return fields


def _exception_fields(record: logging.LogRecord) -> dict[str, Any]:
    exc_type, exc_value, exc_traceback = record.exc_info
    return {
        "type": exc_type.__name__ if exc_type else "Unknown",
        "message": "" if exc_value is None else str(exc_value),
        "traceback": traceback.format_exception(exc_type, exc_value, exc_traceback),
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for log shipping.

    Forwarded handler records are stamped with the time the handler logged
    them rather than the time they were forwarded, and carry no location
    since it would always point at the forwarding code.
    """

    def __init__(
        self,
        *,
        service_name: str = "fnruntime",
        include_timestamp: bool = True,
        include_location: bool = True,
    ) -> None:
        """Initialize the JSON formatter.

        Args:
            service_name: Service identifier for log aggregation.
            include_timestamp: Whether to include timestamp field.
            include_location: Whether to include module/function/line fields.
        """
        super().__init__()
        self._service_name = service_name
        self._include_timestamp = include_timestamp
        self._include_location = include_location

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as a JSON string."""
        fields = record_fields(record)
        handler_timestamp = fields.pop(HANDLER_TIMESTAMP_ATTRIBUTE, None)
        forwarded = WITH_ATTRIBUTE in fields

        entry: dict[str, Any] = {}
        if self._include_timestamp:
            entry["timestamp"] = handler_timestamp or datetime.fromtimestamp(record.created, UTC).isoformat(
                timespec="milliseconds"
            )

        entry["level"] = record.levelname
        entry["logger"] = record.name
        entry["message"] = record.getMessage()
        entry["service"] = self._service_name

        if self._include_location and not forwarded:
            entry["module"] = record.module
            entry["function"] = record.funcName
            entry["line"] = record.lineno

        # context fields never replace the envelope
        entry.update((key, value) for key, value in fields.items() if key not in entry)

        if record.exc_info:
            entry["exception"] = _exception_fields(record)

        return json.dumps(entry, default=str)


class HumanFormatter(logging.Formatter):
    """Pipe-separated lines for reading a worker's output locally."""

    COLORS: ClassVar[dict[str, str]] = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET: ClassVar[str] = "\033[0m"

    def __init__(self, *, use_colors: bool = True) -> None:
        super().__init__()
        self._use_colors = use_colors

    def _level(self, levelname: str) -> str:
        if not self._use_colors:
            return f"{levelname:<8}"
        return f"{self.COLORS.get(levelname, '')}{levelname:<8}{self.RESET}"

    @staticmethod
    def _logger_name(name: str) -> str:
        if len(name) <= _LOGGER_NAME_WIDTH:
            return f"{name:<{_LOGGER_NAME_WIDTH}}"
        return "..." + name[-(_LOGGER_NAME_WIDTH - 3) :]

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record for human readability."""
        fields = record_fields(record)
        fields.pop(HANDLER_TIMESTAMP_ATTRIBUTE, None)

        # handler attributes are flattened so they read like the rest of the line
        attributes = fields.pop(WITH_ATTRIBUTE, None)
        if isinstance(attributes, Mapping):
            fields.update(attributes)

        line = " | ".join(
            [
                datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S"),
                self._level(record.levelname),
                self._logger_name(record.name),
                record.getMessage(),
            ]
        )
        if fields:
            line += " | " + " ".join(f"{key}={value}" for key, value in fields.items())

        if record.exc_info:
            line += "\n" + "".join(traceback.format_exception(*record.exc_info))

        return line
