"""Handler invocation: contexts, result normalization and host glue.

Usage:
    from fnruntime.invocation import Event, Invoker

    def handler(context, event):
        context.logger.info_with("Reversing", length=len(event.body))
        return 201, event.body[::-1]

    result = Invoker(handler).invoke(Event(body=b"abc"))
    assert result.response.body == b"cba"
"""

from fnruntime.invocation.context import HandlerLogger, InvocationContext, InvocationState
from fnruntime.invocation.invoker import InvocationResult, Invoker
from fnruntime.invocation.loader import find_init_context, load_handler
from fnruntime.invocation.models import (
    CanonicalResponse,
    Event,
    HandlerLogLevel,
    LogRecord,
    Response,
    TriggerInfo,
)
from fnruntime.invocation.normalizer import create_error_response, encode_json, normalize
from fnruntime.invocation.results import (
    DescriptorResult,
    EmptyResult,
    ErrorResult,
    MalformedResult,
    PairResult,
    ResultVariant,
    StringResult,
    StructuredResult,
    classify_result,
)

__all__ = [
    "CanonicalResponse",
    "DescriptorResult",
    "EmptyResult",
    "ErrorResult",
    "Event",
    "HandlerLogLevel",
    "HandlerLogger",
    "InvocationContext",
    "InvocationResult",
    "InvocationState",
    "Invoker",
    "LogRecord",
    "MalformedResult",
    "PairResult",
    "Response",
    "ResultVariant",
    "StringResult",
    "StructuredResult",
    "TriggerInfo",
    "classify_result",
    "create_error_response",
    "encode_json",
    "find_init_context",
    "load_handler",
    "normalize",
]
