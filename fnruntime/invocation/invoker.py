"""Host-side glue running one handler against events.

Usage:
    from fnruntime.invocation import Event, Invoker

    invoker = Invoker.from_handler_spec("reverser:handler")
    result = invoker.invoke(Event(method="POST", body=b"abc"))
    print(result.response.to_wire(), result.log_records)
"""

import asyncio
import inspect
import sys
import time
from collections.abc import Awaitable
from dataclasses import dataclass
from types import SimpleNamespace
from typing import Any

from fnruntime.config import Settings, get_settings
from fnruntime.exceptions.invocation_errors import DoubleResponseError, EventLoopRunningError, InvocationError
from fnruntime.exceptions.loading_errors import InitContextError, MalformedHandlerError
from fnruntime.invocation.context import InvocationContext, InvocationState
from fnruntime.invocation.loader import find_init_context, load_handler
from fnruntime.invocation.models import CanonicalResponse, Event, HandlerLogLevel, LogRecord, TriggerInfo
from fnruntime.invocation.normalizer import normalize
from fnruntime.invocation.results import ErrorResult
from fnruntime.logging.adapters.invocation_adapter import emit_log_records, set_invocation_context
from fnruntime.logging.context import clear_context
from fnruntime.logging.logger import get_logger
from fnruntime.types import Handler

logger = get_logger(__name__)


@dataclass(frozen=True)
class InvocationResult:
    """Everything the host forwards after one invocation."""

    response: CanonicalResponse
    log_records: list[LogRecord]
    dropped_log_count: int
    duration_seconds: float
    outcome: InvocationState


async def _resolve(awaitable: Awaitable[Any]) -> Any:
    return await awaitable


def _loop_is_running() -> bool:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


def _run_to_completion(awaitable: Awaitable[Any]) -> Any:
    """Run an awaitable on a new event loop.

    Raises:
        EventLoopRunningError: If called while an event loop is running.
    """
    if _loop_is_running():
        if inspect.iscoroutine(awaitable):
            awaitable.close()
        raise EventLoopRunningError(
            "Coroutine handler invoked from a running event loop, use invoke_async",
            context={"awaitable_type": type(awaitable).__name__},
        )
    return asyncio.run(_resolve(awaitable))


def _elapsed_since(start: float) -> float:
    # never report a zero duration, even when the clock did not advance
    return time.perf_counter() - start or sys.float_info.min


class Invoker:
    """Runs a handler once per event and normalizes what it produced.

    The invoker owns ``user_data`` and hands it to every context it creates;
    nothing else is shared between invocations.
    """

    def __init__(
        self,
        handler: Handler,
        *,
        settings: Settings | None = None,
        user_data: Any = None,
    ) -> None:
        self._handler = handler
        self._settings = settings or get_settings()
        self.user_data = SimpleNamespace() if user_data is None else user_data

    @classmethod
    def from_handler_spec(cls, handler: str, *, settings: Settings | None = None) -> "Invoker":
        """Load a handler, create an invoker and run ``init_context``.

        Raises:
            MalformedHandlerError: If the spec is malformed.
            HandlerNotFoundError: If the handler cannot be found.
            InitContextError: If ``init_context`` raises.
        """
        invoker = cls(load_handler(handler), settings=settings)
        invoker.initialize()
        return invoker

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "Invoker":
        """Create an invoker for the handler named in the settings."""
        settings = settings or get_settings()
        if not settings.handler:
            raise MalformedHandlerError("No handler configured", handler="")
        return cls.from_handler_spec(settings.handler, settings=settings)

    @property
    def settings(self) -> Settings:
        return self._settings

    def create_context(self, log_level: HandlerLogLevel | str | None = None) -> InvocationContext:
        """Create a fresh context for one invocation.

        Args:
            log_level: Minimum handler log level to record. Defaults to the
                configured ``min_handler_log_level``.

        Raises:
            InvocationError: If the log level is not a handler log level.
        """
        requested = log_level or self._settings.min_handler_log_level
        try:
            min_log_level = HandlerLogLevel.parse(requested)
        except ValueError as error:
            raise InvocationError(
                f"Unknown handler log level {str(requested)!r}",
                context={"log_level": str(requested)},
            ) from error

        return InvocationContext(
            min_log_level=min_log_level,
            max_log_records=self._settings.max_log_records,
            user_data=self.user_data,
            worker_id=self._settings.worker_id,
            trigger=TriggerInfo(kind=self._settings.trigger_kind, name=self._settings.trigger_name),
        )

    def initialize(self) -> None:
        """Run the handler module's ``init_context`` hook, if it has one.

        Raises:
            InitContextError: If the hook raises.
            EventLoopRunningError: If an async hook is run from a running event loop.
        """
        init_context = find_init_context(self._handler)
        if init_context is None:
            return

        context = self.create_context()
        try:
            hook_output = init_context(context)
            if inspect.isawaitable(hook_output):
                _run_to_completion(hook_output)
        except EventLoopRunningError:
            raise
        except Exception as error:
            logger.exception("Exception raised while running init_context")
            raise InitContextError(
                f"init_context failed: {error}",
                handler=getattr(self._handler, "__qualname__", None),
            ) from error
        finally:
            self._forward_logs(context.drain_logs())

    def invoke(self, event: Event, *, log_level: HandlerLogLevel | str | None = None) -> InvocationResult:
        """Run the handler against one event.

        Coroutine handlers are run to completion on a new event loop; use
        ``invoke_async`` from code that already runs inside a loop.

        Raises:
            InvocationError: If ``log_level`` is not a handler log level.
            EventLoopRunningError: If a coroutine handler is invoked from a
                running event loop.
            DoubleResponseError: If the handler delivered more than one result.
        """
        context = self.create_context(log_level)
        set_invocation_context(event, context)
        try:
            context.begin()
            start = time.perf_counter()
            try:
                output = self._handler(context, event)
                if inspect.isawaitable(output):
                    output = _run_to_completion(output)
            except EventLoopRunningError:
                raise
            except Exception as error:
                context.complete_with_error(error)
            else:
                context.complete_with_return(output)
            return self._finish(context, _elapsed_since(start))
        finally:
            clear_context()

    async def invoke_async(
        self,
        event: Event,
        *,
        log_level: HandlerLogLevel | str | None = None,
    ) -> InvocationResult:
        """Run the handler against one event, awaiting coroutine handlers.

        Raises:
            InvocationError: If ``log_level`` is not a handler log level.
            DoubleResponseError: If the handler delivered more than one result.
        """
        context = self.create_context(log_level)
        set_invocation_context(event, context)
        try:
            context.begin()
            start = time.perf_counter()
            try:
                output = self._handler(context, event)
                if inspect.isawaitable(output):
                    output = await output
            except Exception as error:
                context.complete_with_error(error)
            else:
                context.complete_with_return(output)
            return self._finish(context, _elapsed_since(start))
        finally:
            clear_context()

    def _finish(self, context: InvocationContext, duration_seconds: float) -> InvocationResult:
        outcome = context.terminal_state or InvocationState.RETURNED

        if context.protocol_violated:
            error = DoubleResponseError(context={"outcome": str(outcome)})
            error.log_records = context.drain_logs()
            logger.error("Handler delivered more than one result", extra={"error": error.to_log_dict()})
            self._forward_logs(error.log_records)
            raise error

        variant = context.outcome()
        if isinstance(variant, ErrorResult):
            logger.warning(
                "Exception caught in handler",
                extra={"error": variant.error.to_log_dict()},
                exc_info=variant.error.cause,
            )

        response = normalize(
            variant,
            include_traceback=self._settings.include_traceback_in_error_body,
        )

        dropped_log_count = context.dropped_log_count
        if dropped_log_count:
            logger.warning("Handler log records dropped", extra={"dropped_log_count": dropped_log_count})

        records = context.drain_logs()
        self._forward_logs(records)

        return InvocationResult(
            response=response,
            log_records=records,
            dropped_log_count=dropped_log_count,
            duration_seconds=duration_seconds,
            outcome=outcome,
        )

    def _forward_logs(self, records: list[LogRecord]) -> None:
        if self._settings.forward_handler_logs and records:
            emit_log_records(records)
