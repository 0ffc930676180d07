"""The per-invocation context handed to handler code."""

from collections.abc import Mapping
from enum import StrEnum
from types import SimpleNamespace
from typing import Any

from fnruntime.exceptions.invocation_errors import DoubleResponseError, HandlerError, InvocationError
from fnruntime.invocation.models import HandlerLogLevel, LogRecord, Response, TriggerInfo
from fnruntime.invocation.results import EmptyResult, ErrorResult, ResultVariant, classify_result


class InvocationState(StrEnum):
    """Lifecycle of an invocation context."""

    FRESH = "fresh"
    INVOKED = "invoked"
    RETURNED = "returned"
    DELIVERED = "delivered"
    ERRORED = "errored"
    DRAINED = "drained"


_TERMINAL_STATES = frozenset({InvocationState.RETURNED, InvocationState.DELIVERED, InvocationState.ERRORED})


def _interpolate(message: object, args: tuple[Any, ...]) -> str:
    if not args:
        return str(message)
    try:
        return str(message) % args
    except (TypeError, ValueError):
        return " ".join([str(message), *(repr(arg) for arg in args)])


class HandlerLogger:
    """Level-named logging methods bound to one invocation context.

    ``info("x %s", y)`` interpolates like the standard library;
    ``info_with("x", key=value)`` attaches structured attributes.
    """

    def __init__(self, context: "InvocationContext") -> None:
        self._context = context

    def debug(self, message: object, *args: Any) -> None:
        self._context._record(HandlerLogLevel.DEBUG, message, args)

    def info(self, message: object, *args: Any) -> None:
        self._context._record(HandlerLogLevel.INFO, message, args)

    def warn(self, message: object, *args: Any) -> None:
        self._context._record(HandlerLogLevel.WARN, message, args)

    def error(self, message: object, *args: Any) -> None:
        self._context._record(HandlerLogLevel.ERROR, message, args)

    def debug_with(self, message: object, *args: Any, **attributes: Any) -> None:
        self._context._record(HandlerLogLevel.DEBUG, message, args, attributes)

    def info_with(self, message: object, *args: Any, **attributes: Any) -> None:
        self._context._record(HandlerLogLevel.INFO, message, args, attributes)

    def warn_with(self, message: object, *args: Any, **attributes: Any) -> None:
        self._context._record(HandlerLogLevel.WARN, message, args, attributes)

    def error_with(self, message: object, *args: Any, **attributes: Any) -> None:
        self._context._record(HandlerLogLevel.ERROR, message, args, attributes)

    warning = warn
    warning_with = warn_with


class InvocationContext:
    """Mediates everything handler code sends back during one invocation.

    A context is owned by exactly one invocation and is never shared, so it
    takes no locks. It keeps an ordered log sink and a write-once result
    cell. The first terminal event (return, raise or delivery) decides the
    outcome; a second delivery is a protocol violation.

    Attributes:
        logger: Level-named logging facade over ``log``.
        user_data: Namespace shared with ``init_context`` and other invocations
            of the same invoker.
        worker_id: Identifier of the worker serving the invocation.
        trigger: Trigger configured for the worker.
    """

    Response = Response

    def __init__(
        self,
        *,
        min_log_level: HandlerLogLevel = HandlerLogLevel.DEBUG,
        max_log_records: int = 10_000,
        user_data: Any = None,
        worker_id: str = "",
        trigger: TriggerInfo | None = None,
    ) -> None:
        self.logger = HandlerLogger(self)
        self.user_data = SimpleNamespace() if user_data is None else user_data
        self.worker_id = worker_id
        self.trigger = trigger or TriggerInfo()

        self._min_log_level = min_log_level
        self._max_log_records = max_log_records
        self._records: list[LogRecord] = []
        self._dropped_log_count = 0

        self._state = InvocationState.FRESH
        self._terminal_state: InvocationState | None = None
        self._delivery_count = 0
        self._delivered: object = None
        self._returned: object = None
        self._error: HandlerError | None = None

    @property
    def state(self) -> InvocationState:
        return self._state

    @property
    def terminal_state(self) -> InvocationState | None:
        """The first terminal event observed, if any."""
        return self._terminal_state

    @property
    def dropped_log_count(self) -> int:
        """Number of records that could not be recorded."""
        return self._dropped_log_count

    @property
    def has_result(self) -> bool:
        """Whether a result was delivered through the callback."""
        return self._delivery_count > 0

    @property
    def protocol_violated(self) -> bool:
        """Whether the handler delivered a result more than once."""
        return self._delivery_count > 1

    def log(
        self,
        level: HandlerLogLevel | str,
        message: object,
        attributes: Mapping[str, Any] | None = None,
    ) -> None:
        """Append a log record. Never raises.

        Records below the invocation's minimum level are skipped. Records
        that cannot be stored (unknown level, full sink, unprintable message,
        bad attributes, context already drained) are counted in
        ``dropped_log_count``.

        Args:
            level: One of debug, info, warn, error.
            message: The message, converted with ``str``.
            attributes: Optional structured attributes, kept as-is.
        """
        self._record(level, message, (), attributes)

    def _record(
        self,
        level: HandlerLogLevel | str,
        message: object,
        args: tuple[Any, ...],
        attributes: Mapping[str, Any] | None = None,
    ) -> None:
        try:
            parsed_level = HandlerLogLevel.parse(level)
            if parsed_level.severity < self._min_log_level.severity:
                return

            # nobody drains the sink again once the host has collected it
            if self._state == InvocationState.DRAINED or len(self._records) >= self._max_log_records:
                self._dropped_log_count += 1
                return

            self._records.append(
                LogRecord(
                    level=parsed_level,
                    message=_interpolate(message, args),
                    attributes=dict(attributes or {}),
                )
            )
        except Exception:
            self._dropped_log_count += 1

    def deliver_result(self, value: object) -> None:
        """Deliver the invocation's result without returning it.

        Args:
            value: Any shape a handler may return.

        Raises:
            DoubleResponseError: If a result was already delivered.
        """
        self._delivery_count += 1
        if self._delivery_count > 1:
            raise DoubleResponseError(context={"delivery_count": self._delivery_count})

        self._delivered = value
        if self._state in (InvocationState.FRESH, InvocationState.INVOKED):
            self._state = InvocationState.DELIVERED
            self._terminal_state = self._state

    callback = deliver_result

    def begin(self) -> None:
        """Mark the handler as called.

        Raises:
            InvocationError: If the context was already used.
        """
        if self._state != InvocationState.FRESH:
            raise InvocationError(
                "Invocation context cannot be reused",
                context={"state": str(self._state)},
            )
        self._state = InvocationState.INVOKED

    def complete_with_return(self, value: object) -> bool:
        """Record the handler's return value.

        Returns:
            True if the return is the terminal event, False if ignored.
        """
        if self._state != InvocationState.INVOKED:
            return False
        self._returned = value
        self._state = InvocationState.RETURNED
        self._terminal_state = self._state
        return True

    def complete_with_error(self, error: BaseException) -> bool:
        """Record an error raised by the handler.

        Returns:
            True if the error is the terminal event, False if ignored.
        """
        if self._state != InvocationState.INVOKED:
            return False
        self._error = HandlerError.from_exception(error)
        self._state = InvocationState.ERRORED
        self._terminal_state = self._state
        return True

    def outcome(self) -> ResultVariant:
        """Classify the terminal outcome of the invocation.

        The first terminal event wins, so a result delivered while the
        handler runs takes precedence over the value it then returns.
        """
        match self._terminal_state:
            case InvocationState.DELIVERED:
                return classify_result(self._delivered)
            case InvocationState.ERRORED if self._error is not None:
                return ErrorResult(self._error)
            case InvocationState.RETURNED:
                return classify_result(self._returned)
        return EmptyResult()

    def drain_logs(self) -> list[LogRecord]:
        """Return the recorded log records in order and empty the sink."""
        records, self._records = self._records, []
        if self._state in _TERMINAL_STATES:
            self._state = InvocationState.DRAINED
        return records
