"""Result variants produced by classifying what a handler returned.

A handler's output is inspected once, at the boundary, and turned into one
of these variants. The normalizer matches on them exhaustively.
"""

from collections.abc import Mapping
from dataclasses import dataclass

from pydantic import BaseModel

from fnruntime.exceptions.invocation_errors import HandlerError
from fnruntime.invocation.models import Response


@dataclass(frozen=True, slots=True)
class StringResult:
    """A bare string or bytes body."""

    body: str | bytes


@dataclass(frozen=True, slots=True)
class PairResult:
    """A ``(status, payload)`` pair."""

    status_code: int
    payload: object


@dataclass(frozen=True, slots=True)
class StructuredResult:
    """A mapping, list, tuple or pydantic model serialized as JSON."""

    value: object


@dataclass(frozen=True, slots=True)
class DescriptorResult:
    """A full response descriptor."""

    descriptor: Response


@dataclass(frozen=True, slots=True)
class ErrorResult:
    """The handler raised."""

    error: HandlerError


@dataclass(frozen=True, slots=True)
class EmptyResult:
    """The handler returned None and delivered nothing."""


@dataclass(frozen=True, slots=True)
class MalformedResult:
    """A value matching none of the supported shapes."""

    reason: str
    result_type: str


ResultVariant = (
    StringResult
    | PairResult
    | StructuredResult
    | DescriptorResult
    | ErrorResult
    | EmptyResult
    | MalformedResult
)


def is_status_pair(value: object) -> bool:
    """Check for a two-element list or tuple led by an integer status."""
    return (
        isinstance(value, list | tuple)
        and len(value) == 2
        and isinstance(value[0], int)
        and not isinstance(value[0], bool)
    )


def classify_result(value: object) -> ResultVariant:
    """Classify a returned, delivered or raised value.

    Shapes are checked in priority order: error, status pair, string,
    structured value, descriptor, then None.

    Args:
        value: Whatever the handler produced.

    Returns:
        The matching result variant.
    """
    if isinstance(value, BaseException):
        return ErrorResult(HandlerError.from_exception(value))

    if is_status_pair(value):
        status_code, payload = value
        return PairResult(status_code=status_code, payload=payload)

    if isinstance(value, str | bytes | bytearray):
        return StringResult(bytes(value) if isinstance(value, bytearray) else value)

    if isinstance(value, Mapping | list | tuple | BaseModel):
        return StructuredResult(value)

    if isinstance(value, Response):
        return DescriptorResult(value)

    if value is None:
        return EmptyResult()

    result_type = type(value).__name__
    return MalformedResult(
        reason=f"Handler returned an unsupported result type '{result_type}'",
        result_type=result_type,
    )
